"""
Symbolic Boolean/integer expressions solved through SMT solvers.

This package builds expression trees, serializes them to SMT-LIBv2, drives
solver processes interactively and enumerates all satisfying assignments.
"""

__version__ = "0.1.0"

from .errors import (
    SatisfiabilityError,
    DuplicateName,
    DuplicateNameWarning,
    ArityMismatch,
    TypeMismatch,
    SolverUnavailable,
    ProtocolError,
    NoModelAvailable,
    SolverTimeout,
    SolverIndeterminate,
    SessionStateError,
)
from .expr import (
    Expr,
    Op,
    Sort,
    NameRegistry,
    Bool,
    Int,
    Var,
    add,
    and_,
    assign,
    broadcast,
    combine,
    distinct,
    eq,
    equals,
    evaluate,
    ge,
    gt,
    iff,
    implies,
    ite,
    le,
    lt,
    ne,
    not_,
    or_,
    render,
    reset_registry,
    set_duplicate_name_warning,
    sub,
    variables,
    xor,
)
from .smt import SMTSerializer, generate_smt2, write_smt2
from .solver import (
    SessionState,
    SolverOptions,
    SolverResult,
    SolverSession,
    open_session,
)
from .solutions import (
    Enumeration,
    SolutionEnumerator,
    all_solutions,
    block,
    sat,
)

__all__ = [
    "SatisfiabilityError",
    "DuplicateName",
    "DuplicateNameWarning",
    "ArityMismatch",
    "TypeMismatch",
    "SolverUnavailable",
    "ProtocolError",
    "NoModelAvailable",
    "SolverTimeout",
    "SolverIndeterminate",
    "SessionStateError",
    "Expr",
    "Op",
    "Sort",
    "NameRegistry",
    "Bool",
    "Int",
    "Var",
    "add",
    "and_",
    "assign",
    "broadcast",
    "combine",
    "distinct",
    "eq",
    "equals",
    "evaluate",
    "ge",
    "gt",
    "iff",
    "implies",
    "ite",
    "le",
    "lt",
    "ne",
    "not_",
    "or_",
    "render",
    "reset_registry",
    "set_duplicate_name_warning",
    "sub",
    "variables",
    "xor",
    "SMTSerializer",
    "generate_smt2",
    "write_smt2",
    "SessionState",
    "SolverOptions",
    "SolverResult",
    "SolverSession",
    "open_session",
    "Enumeration",
    "SolutionEnumerator",
    "all_solutions",
    "block",
    "sat",
]
