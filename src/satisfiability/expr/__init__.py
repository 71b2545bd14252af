"""Expression trees: nodes, variable registry, constructors and evaluation."""

from .node import (
    Expr,
    Op,
    Sort,
    as_list,
    combine,
    constant,
    count_nodes,
    equals,
    iter_nodes,
    render,
    variables,
)
from .registry import (
    NameRegistry,
    default_registry,
    reset_registry,
    set_duplicate_name_warning,
)
from .builders import (
    Bool,
    Int,
    Var,
    add,
    and_,
    broadcast,
    distinct,
    eq,
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
    sub,
    xor,
)
from .evaluate import assign, clear, evaluate

__all__ = [
    "Expr",
    "Op",
    "Sort",
    "as_list",
    "combine",
    "constant",
    "count_nodes",
    "equals",
    "iter_nodes",
    "render",
    "variables",
    "NameRegistry",
    "default_registry",
    "reset_registry",
    "set_duplicate_name_warning",
    "Bool",
    "Int",
    "Var",
    "add",
    "and_",
    "broadcast",
    "distinct",
    "eq",
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
    "sub",
    "xor",
    "assign",
    "clear",
    "evaluate",
]
