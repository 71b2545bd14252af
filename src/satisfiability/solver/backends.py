"""Solver backend table: how to launch each supported SMT solver.

Each backend runs in interactive, model-producing mode, reading SMT-LIBv2
commands on stdin and answering on stdout.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple
import os
import shutil


@dataclass(frozen=True)
class SolverSpec:
    """Describes how to invoke an external SMT solver."""

    name: str
    argv: Tuple[str, ...]


# In-process backend driven through the z3 Python bindings.
Z3_API = "z3-api"

DEFAULT_SOLVER = "z3"

SOLVER_ENV_VAR = "SATISFIABILITY_SMT_SOLVER"

_KNOWN_SOLVERS = {
    "z3": SolverSpec("z3", ("z3", "-smt2", "-in")),
    "cvc5": SolverSpec("cvc5", ("cvc5", "--lang=smt2", "--incremental", "--produce-models")),
}


def known_solvers() -> Tuple[str, ...]:
    return tuple(_KNOWN_SOLVERS) + (Z3_API,)


def resolve_solver(name_or_path: str, command: Optional[Sequence[str]] = None) -> SolverSpec:
    """Resolve a solver name to an invocation spec.

    Args:
        name_or_path: Backend name ("z3", "cvc5") or path to an executable
        command: Explicit argv overriding the backend's default command line
    """
    if command:
        return SolverSpec(name_or_path, tuple(command))

    if name_or_path in _KNOWN_SOLVERS:
        return _KNOWN_SOLVERS[name_or_path]

    p = Path(name_or_path)
    return SolverSpec(p.name or str(p), (str(p),))


def is_executable_available(exe: str) -> bool:
    # Explicit path
    if os.path.sep in exe or (os.path.altsep and os.path.altsep in exe):
        return os.path.exists(exe) and os.access(exe, os.X_OK)

    return shutil.which(exe) is not None


def is_solver_available(name_or_path: str) -> bool:
    """Return True if the solver appears runnable on this system."""
    if name_or_path == Z3_API:
        return True
    spec = resolve_solver(name_or_path)
    return is_executable_available(spec.argv[0])


def default_solver() -> str:
    """Backend used when none is given: $SATISFIABILITY_SMT_SOLVER, else z3."""
    return os.environ.get(SOLVER_ENV_VAR) or DEFAULT_SOLVER


def pick_solver(preferred: Sequence[str] = ("z3", "cvc5")) -> Optional[str]:
    """Pick the first available solver from a preference list.

    Users can override by setting $SATISFIABILITY_SMT_SOLVER.
    """
    env = os.environ.get(SOLVER_ENV_VAR)
    if env and is_solver_available(env):
        return env

    for n in preferred:
        if is_solver_available(n):
            return n

    return None
