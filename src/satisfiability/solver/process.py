"""Drive an SMT solver subprocess interactively over stdin/stdout.

The solver is started once per session and kept alive; commands are written
one per line and responses are read back as complete S-expressions.
"""

from __future__ import annotations

from collections import deque
from typing import IO, Deque, List, Optional
import logging
import queue
import subprocess
import threading
import time

from ..errors import ProtocolError, SolverTimeout, SolverUnavailable
from ..smt import sexpr
from .backends import SolverSpec, is_executable_available, resolve_solver
from .base import SolverOptions, SolverSession

logger = logging.getLogger(__name__)

# Seconds to wait for the solver to exit after (exit) before killing it.
EXIT_GRACE_S = 1.0

_EOF = None


def _pump(stream: IO[str], sink) -> None:
    """Forward lines from a pipe to `sink` until EOF."""
    try:
        for line in iter(stream.readline, ""):
            sink(line)
    except (OSError, ValueError):
        # Pipe closed underneath us while the session is shutting down.
        pass


class ProcessSession(SolverSession):
    """Solver session backed by an external solver process."""

    def __init__(self, spec: SolverSpec, options: Optional[SolverOptions] = None):
        super().__init__(options)
        self.spec = spec
        self.name = spec.name
        self._proc: Optional[subprocess.Popen] = None
        self._lines: "queue.Queue[Optional[str]]" = queue.Queue()
        self._stderr: Deque[str] = deque(maxlen=20)

    @classmethod
    def for_backend(cls, kind: str, options: Optional[SolverOptions] = None) -> "ProcessSession":
        options = options or SolverOptions()
        return cls(resolve_solver(kind, options.command), options)

    @property
    def argv(self) -> List[str]:
        return [*self.spec.argv, *self.options.extra_args]

    def _start(self) -> None:
        argv = self.argv
        if not is_executable_available(argv[0]):
            raise SolverUnavailable(f"Solver executable not found: {argv[0]}")
        try:
            self._proc = subprocess.Popen(
                argv,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                bufsize=1,
            )
        except OSError as e:
            raise SolverUnavailable(f"Failed to start {self.spec.name}: {e}") from e

        logger.debug("Started %s (pid %d): %s", self.spec.name, self._proc.pid, " ".join(argv))
        threading.Thread(
            target=self._read_stdout, name=f"{self.spec.name}-stdout", daemon=True).start()
        threading.Thread(
            target=_pump, args=(self._proc.stderr, self._stderr.append),
            name=f"{self.spec.name}-stderr", daemon=True).start()

    def _read_stdout(self) -> None:
        _pump(self._proc.stdout, self._lines.put)
        self._lines.put(_EOF)

    def _send(self, command: str) -> None:
        logger.debug("%s <- %s", self.spec.name, command)
        try:
            self._proc.stdin.write(command + "\n")
            self._proc.stdin.flush()
        except (OSError, ValueError) as e:
            raise ProtocolError(f"{self.spec.name} is not accepting input: {e}") from e

    def _read_response(self) -> str:
        """Read lines until they form one complete S-expression or atom."""
        timeout = self.options.timeout_s
        deadline = None if timeout is None else time.monotonic() + timeout
        text = ""
        while True:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            try:
                line = self._lines.get(timeout=remaining)
            except queue.Empty:
                self._kill()
                raise SolverTimeout(
                    f"{self.spec.name} did not answer within {timeout} seconds") from None

            if line is _EOF:
                detail = "; ".join(s.strip() for s in list(self._stderr))
                raise ProtocolError(
                    f"{self.spec.name} exited unexpectedly" + (f": {detail}" if detail else ""),
                    text or None)

            text += line
            if sexpr.is_complete(text):
                logger.debug("%s -> %s", self.spec.name, text.strip())
                return text

    def _check_response(self) -> str:
        self._send("(check-sat)")
        return self._read_response()

    def _get_value_response(self, names: List[str]) -> str:
        self._send(self.get_value_command(names))
        return self._read_response()

    def _kill(self) -> None:
        if self._proc is not None and self._proc.poll() is None:
            logger.debug("Killing %s (pid %d)", self.spec.name, self._proc.pid)
            self._proc.kill()
            self._proc.wait()

    def _terminate(self, graceful: bool) -> None:
        proc = self._proc
        if proc is None:
            return
        try:
            if graceful and proc.poll() is None:
                try:
                    self._send("(exit)")
                    proc.wait(timeout=EXIT_GRACE_S)
                except (ProtocolError, subprocess.TimeoutExpired):
                    logger.debug("%s did not exit cleanly", self.spec.name)
            self._kill()
        finally:
            for stream in (proc.stdin, proc.stdout, proc.stderr):
                if stream is not None:
                    try:
                        stream.close()
                    except OSError:
                        pass
            self._proc = None
