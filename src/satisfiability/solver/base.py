"""
Solver session interface and the state machine shared by all backends.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Sequence
import logging

from ..errors import (
    NoModelAvailable,
    ProtocolError,
    SessionStateError,
    SolverTimeout,
    TypeMismatch,
)
from ..expr.node import Expr, Op, Sort, Value, as_list
from ..smt.serializer import SMTSerializer, symbol
from ..smt import sexpr
from .result import SolverResult

logger = logging.getLogger(__name__)

# Maximum number of terms per get-value command.
GET_VALUE_CHUNK = 50


class SolverBackend(Protocol):
    """Protocol defining the interface of an SMT solver session.

    This allows pluggable solver implementations (subprocess solvers, the
    in-process Z3 API) behind one API.
    """

    def assert_(self, expr: Expr) -> None:
        """Add a constraint to the solver."""
        ...

    def check_sat(self) -> SolverResult:
        """Check satisfiability of the asserted constraints."""
        ...

    def get_model(self, variables: Any = None) -> Dict[str, Value]:
        """Get variable assignments after a SAT result."""
        ...

    def push(self) -> None:
        """Push a new assertion scope."""
        ...

    def pop(self) -> None:
        """Pop the most recent assertion scope."""
        ...

    def close(self) -> None:
        """Release the solver."""
        ...


class SessionState(Enum):
    CREATED = "created"
    RUNNING = "running"
    CLOSED = "closed"
    FAILED = "failed"


@dataclass
class SolverOptions:
    """Per-session configuration.

    Attributes:
        command: Explicit argv replacing the backend's default command line
        extra_args: Extra command-line flags appended to the default argv
        timeout_s: Deadline for each blocking call, None to wait forever
        logic: SMT-LIB logic to set at startup (e.g. "QF_LIA")
    """
    command: Optional[Sequence[str]] = None
    extra_args: Sequence[str] = ()
    timeout_s: Optional[float] = None
    logic: Optional[str] = None


class SolverSession:
    """Base class for a stateful solver session.

    Subclasses provide the transport: `_start`, `_send`, `_check_response`,
    `_get_value_response` and `_terminate`. This class owns the lifecycle
    (CREATED -> RUNNING -> CLOSED, FAILED on protocol errors or timeouts),
    the per-session serializer and response parsing.

    Sessions are context managers; leaving the block always closes them.
    """

    name = "solver"

    def __init__(self, options: Optional[SolverOptions] = None):
        self.options = options or SolverOptions()
        self.state = SessionState.CREATED
        self.serializer = SMTSerializer()
        self._last_result: Optional[SolverResult] = None
        self._scopes: List[Dict[str, Sort]] = []

    # Transport hooks

    def _start(self) -> None:
        raise NotImplementedError

    def _send(self, command: str) -> None:
        raise NotImplementedError

    def _check_response(self) -> str:
        raise NotImplementedError

    def _get_value_response(self, names: List[str]) -> str:
        raise NotImplementedError

    def _terminate(self, graceful: bool) -> None:
        raise NotImplementedError

    # Lifecycle

    def open(self) -> "SolverSession":
        """Start the backend and move to RUNNING.

        Raises:
            SolverUnavailable: If the backend cannot be started
        """
        if self.state != SessionState.CREATED:
            raise SessionStateError(f"Cannot open a session in state {self.state.value}")
        self._start()
        self.state = SessionState.RUNNING
        logger.info("Opened %s session", self.name)
        try:
            self._exchange(self._send, "(set-option :produce-models true)")
            if self.options.logic:
                self._exchange(self._send, f"(set-logic {self.options.logic})")
        except BaseException:
            self.close()
            raise
        return self

    def close(self) -> None:
        """Stop the backend. Safe to call repeatedly and from error paths."""
        if self.state == SessionState.CLOSED:
            return
        graceful = self.state == SessionState.RUNNING
        try:
            self._terminate(graceful)
        finally:
            self.state = SessionState.CLOSED
            self._last_result = None
            logger.info("Closed %s session", self.name)

    def __enter__(self) -> "SolverSession":
        if self.state == SessionState.CREATED:
            self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _require_running(self, operation: str) -> None:
        if self.state != SessionState.RUNNING:
            raise SessionStateError(
                f"Cannot {operation}: {self.name} session is {self.state.value}")

    def _exchange(self, fn, *args):
        """Run a transport call; protocol failures and timeouts fail the session."""
        try:
            return fn(*args)
        except (ProtocolError, SolverTimeout):
            self.state = SessionState.FAILED
            self._last_result = None
            raise

    # Operations

    def assert_(self, expr: Expr) -> None:
        """Serialize and send an assertion (declaring new variables first)."""
        self._require_running("assert")
        text = self.serializer.serialize_assertion(expr)
        for command in text.splitlines():
            self._exchange(self._send, command)
        self._last_result = None

    def check_sat(self) -> SolverResult:
        """Ask the solver for satisfiability of everything asserted so far.

        Raises:
            ProtocolError: If the response is missing or malformed
            SolverTimeout: If the configured deadline expires
        """
        self._require_running("check satisfiability")
        response = self._exchange(self._check_response)
        result = self._exchange(self._parse_status, response)
        self._last_result = result
        logger.debug("%s check-sat -> %s", self.name, result.value)
        return result

    def _parse_status(self, response: str) -> SolverResult:
        items = sexpr.parse(response)
        if len(items) == 1:
            msg = sexpr.error_message(items[0])
            if msg is not None:
                raise ProtocolError(f"{self.name} reported an error: {msg}", response)
        return SolverResult.from_response(response)

    def get_model(self, variables: Any = None) -> Dict[str, Value]:
        """Values of the given variables (default: all declared) in the current model.

        Variables never used in an assertion are unconstrained and reported
        with a default value (False or 0).

        Raises:
            NoModelAvailable: If the last check was not SAT
            ProtocolError: If the value response cannot be parsed
        """
        self._require_running("get a model")
        if self._last_result != SolverResult.SAT:
            raise NoModelAvailable("No model available: the last check-sat was not sat")

        if variables is None:
            names = self.serializer.declared_names()
            defaults: Dict[str, Value] = {}
        else:
            names, defaults = [], {}
            for v in as_list(variables):
                if v.op != Op.IDENTITY:
                    raise TypeMismatch(f"Model values can only be requested for variables, not '{v.name}'")
                if v.name in self.serializer.declared:
                    names.append(v.name)
                else:
                    defaults[v.name] = 0 if v.sort == Sort.INT else False

        model: Dict[str, Value] = {}
        for i in range(0, len(names), GET_VALUE_CHUNK):
            chunk = names[i:i + GET_VALUE_CHUNK]
            response = self._exchange(self._get_value_response, chunk)
            model.update(self._exchange(self._parse_values, response, chunk))
        model.update(defaults)
        return model

    def _parse_values(self, response: str, names: List[str]) -> Dict[str, Value]:
        items = sexpr.parse(response)
        if len(items) != 1 or not isinstance(items[0], list):
            raise ProtocolError("Malformed get-value response", response)
        msg = sexpr.error_message(items[0])
        if msg is not None:
            raise ProtocolError(f"{self.name} reported an error: {msg}", response)

        values: Dict[str, Value] = {}
        for pair in items[0]:
            if not isinstance(pair, list) or len(pair) != 2 or not isinstance(pair[0], str):
                raise ProtocolError(f"Malformed get-value entry: {pair!r}", response)
            values[pair[0]] = sexpr.parse_value(pair[1])

        missing = [n for n in names if n not in values]
        if missing:
            raise ProtocolError(f"get-value response is missing {', '.join(missing)}", response)
        return {n: values[n] for n in names}

    def get_value_command(self, names: List[str]) -> str:
        return f"(get-value ({' '.join(symbol(n) for n in names)}))"

    def push(self) -> None:
        """Open an assertion scope; declarations made inside it are popped too."""
        self._require_running("push")
        self._exchange(self._send, "(push 1)")
        self._scopes.append(dict(self.serializer.declared))
        self._last_result = None

    def pop(self) -> None:
        self._require_running("pop")
        if not self._scopes:
            raise SessionStateError("pop without a matching push")
        self._exchange(self._send, "(pop 1)")
        self.serializer.declared = self._scopes.pop()
        self._last_result = None
