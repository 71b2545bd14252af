"""
In-process solver session using the Z3 Python bindings.

Assertions go through the same SMT-LIB serializer as the subprocess
backends and are parsed by Z3 itself, so both paths see identical problems.
"""
from typing import Dict, List, Optional
import logging

import z3

from ..errors import ProtocolError, SolverTimeout
from ..expr.node import Sort
from ..smt import sexpr
from ..smt.serializer import literal, symbol
from .base import SolverOptions, SolverSession

logger = logging.getLogger(__name__)


class Z3Session(SolverSession):
    """Z3 solver session wrapper.

    Provides the session interface on top of a `z3.Solver` instance.
    """

    name = "z3-api"

    def __init__(self, options: Optional[SolverOptions] = None):
        super().__init__(options)
        self.solver: Optional[z3.Solver] = None
        self._consts: Dict[str, z3.ExprRef] = {}
        self._declared: List[str] = []
        self._decl_scopes: List[int] = []

    def _declare(self, command: str) -> None:
        _, name, sort = sexpr.parse(command)[0]
        self._consts[name] = z3.Int(name) if sort == Sort.INT.value else z3.Bool(name)
        self._declared.append(name)

    def _start(self) -> None:
        self.solver = z3.Solver()
        if self.options.timeout_s is not None:
            self.solver.set("timeout", int(self.options.timeout_s * 1000))

    def _send(self, command: str) -> None:
        logger.debug("%s <- %s", self.name, command)
        if command.startswith("(declare-const "):
            self._declare(command)
        elif command.startswith("(assert "):
            try:
                self.solver.add(z3.parse_smt2_string(command, decls=self._consts))
            except z3.Z3Exception as e:
                raise ProtocolError(f"z3 rejected assertion: {e}", command) from e
        elif command.startswith("(push"):
            self.solver.push()
            self._decl_scopes.append(len(self._declared))
        elif command.startswith("(pop"):
            self.solver.pop()
            mark = self._decl_scopes.pop()
            for name in self._declared[mark:]:
                del self._consts[name]
            del self._declared[mark:]
        elif command.startswith("(set-logic "):
            logic = command[len("(set-logic "):-1].strip()
            solver = z3.SolverFor(logic)
            if self.options.timeout_s is not None:
                solver.set("timeout", int(self.options.timeout_s * 1000))
            self.solver = solver
        # set-option and exit need no action in-process

    def _check_response(self) -> str:
        result = self.solver.check()
        if result == z3.sat:
            return "sat"
        if result == z3.unsat:
            return "unsat"
        reason = self.solver.reason_unknown()
        if self.options.timeout_s is not None and reason in ("timeout", "canceled"):
            raise SolverTimeout(f"z3 did not answer within {self.options.timeout_s} seconds")
        logger.debug("z3 returned unknown: %s", reason)
        return "unknown"

    def _get_value_response(self, names: List[str]) -> str:
        model = self.solver.model()
        pairs = []
        for name in names:
            sort = self.serializer.sort_of(name)
            const = z3.Int(name) if sort == Sort.INT else z3.Bool(name)
            value = model.eval(const, model_completion=True)

            # Convert Z3 values to SMT-LIB literals
            if z3.is_int_value(value):
                text = literal(value.as_long())
            elif z3.is_true(value):
                text = "true"
            elif z3.is_false(value):
                text = "false"
            else:
                text = value.sexpr()
            pairs.append(f"({symbol(name)} {text})")
        return f"({' '.join(pairs)})"

    def _terminate(self, graceful: bool) -> None:
        self.solver = None
        self._consts = {}
        self._declared = []
        self._decl_scopes = []

