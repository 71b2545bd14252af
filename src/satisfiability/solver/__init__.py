"""Solver sessions: subprocess SMT solvers and the in-process Z3 backend."""

from typing import Optional

from .result import SolverResult
from .base import SessionState, SolverBackend, SolverOptions, SolverSession
from .backends import (
    SolverSpec,
    Z3_API,
    default_solver,
    is_solver_available,
    known_solvers,
    pick_solver,
    resolve_solver,
)
from .process import ProcessSession
from .z3_session import Z3Session


def create_session(kind: Optional[str] = None, options: Optional[SolverOptions] = None) -> SolverSession:
    """Create an unopened session for a backend (see `open_session`)."""
    kind = kind or default_solver()
    if kind == Z3_API:
        return Z3Session(options)
    return ProcessSession.for_backend(kind, options)


def open_session(kind: Optional[str] = None, options: Optional[SolverOptions] = None) -> SolverSession:
    """Start a solver session.

    Args:
        kind: "z3", "cvc5", "z3-api" (in-process) or a path to a solver
            executable; defaults to $SATISFIABILITY_SMT_SOLVER or "z3"
        options: Command override, extra flags, timeout and logic

    Returns:
        A RUNNING session, usable as a context manager

    Raises:
        SolverUnavailable: If the backend cannot be started
    """
    return create_session(kind, options).open()


__all__ = [
    "SolverResult",
    "SessionState",
    "SolverBackend",
    "SolverOptions",
    "SolverSession",
    "SolverSpec",
    "Z3_API",
    "default_solver",
    "is_solver_available",
    "known_solvers",
    "pick_solver",
    "resolve_solver",
    "ProcessSession",
    "Z3Session",
    "create_session",
    "open_session",
]
