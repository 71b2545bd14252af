"""
Variable constructors and operator combinators.

    x = Bool("x")            # single Boolean variable
    z = Bool(3, "z")         # [z_1, z_2, z_3]
    q = Int(2, 2, "q")       # [[q_1_1, q_1_2], [q_2_1, q_2_2]]

Every combinator accepts single expressions, Python literals or (nested)
lists of them; a single expression behaves like a length-1 list.
"""
from itertools import combinations
from typing import Any, List, Optional, Union

from ..errors import ArityMismatch, TypeMismatch
from .node import Expr, Op, Operand, Sort, as_list, combine
from .registry import NameRegistry, resolve_registry


def _variable(name: str, sort: Optional[Sort], registry: Optional[NameRegistry]) -> Expr:
    if not isinstance(name, str) or not name:
        raise TypeMismatch(f"Variable name must be a non-empty string, got {name!r}")
    resolve_registry(registry).register(name)
    return Expr(Op.IDENTITY, name=name, sort=sort)


def _variable_array(dims: tuple, name: str, sort: Optional[Sort],
                    registry: Optional[NameRegistry]) -> Union[Expr, List[Any]]:
    if not dims:
        return _variable(name, sort, registry)
    n = dims[0]
    if not isinstance(n, int) or isinstance(n, bool) or n < 0:
        raise ArityMismatch(f"Array dimension must be a non-negative integer, got {n!r}")
    return [_variable_array(dims[1:], f"{name}_{i}", sort, registry) for i in range(1, n + 1)]


def Bool(*args: Any, registry: Optional[NameRegistry] = None) -> Any:
    """Create a Boolean variable, or a nested list of them.

    `Bool(name)` returns one variable; `Bool(n, name)` a list named
    `name_1 .. name_n`; `Bool(m, n, name)` a list of lists named `name_i_j`.
    """
    if not args:
        raise ArityMismatch("Bool() requires a name")
    *dims, name = args
    return _variable_array(tuple(dims), name, Sort.BOOL, registry)


def Int(*args: Any, registry: Optional[NameRegistry] = None) -> Any:
    """Create an integer variable, or a nested list of them (see Bool)."""
    if not args:
        raise ArityMismatch("Int() requires a name")
    *dims, name = args
    return _variable_array(tuple(dims), name, Sort.INT, registry)


def Var(name: str, registry: Optional[NameRegistry] = None) -> Expr:
    """Create a variable whose sort is inferred from use at serialization."""
    return _variable(name, None, registry)


def not_(expr: Operand) -> Expr:
    return combine(Op.NOT, [expr])


def and_(*exprs: Any) -> Expr:
    return combine(Op.AND, as_list(exprs))


def or_(*exprs: Any) -> Expr:
    return combine(Op.OR, as_list(exprs))


def xor(*exprs: Any) -> Expr:
    return combine(Op.XOR, as_list(exprs))


def iff(a: Operand, b: Operand) -> Expr:
    return combine(Op.IFF, [a, b])


def implies(a: Operand, b: Operand) -> Expr:
    return combine(Op.IMPLIES, [a, b])


def ite(cond: Operand, then: Operand, otherwise: Operand) -> Expr:
    return combine(Op.ITE, [cond, then, otherwise])


def eq(a: Operand, b: Operand) -> Expr:
    return combine(Op.EQ, [a, b])


def ne(a: Operand, b: Operand) -> Expr:
    return combine(Op.NE, [a, b])


def le(a: Operand, b: Operand) -> Expr:
    return combine(Op.LE, [a, b])


def lt(a: Operand, b: Operand) -> Expr:
    return combine(Op.LT, [a, b])


def ge(a: Operand, b: Operand) -> Expr:
    return combine(Op.GE, [a, b])


def gt(a: Operand, b: Operand) -> Expr:
    return combine(Op.GT, [a, b])


def add(*exprs: Any) -> Expr:
    return combine(Op.ADD, as_list(exprs))


def sub(*exprs: Any) -> Expr:
    return combine(Op.SUB, as_list(exprs))


def distinct(*exprs: Any) -> Expr:
    """Conjunction of pairwise disequalities."""
    terms = as_list(exprs)
    if len(terms) < 2:
        raise ArityMismatch(f"distinct expects at least 2 terms, got {len(terms)}")
    return and_([ne(a, b) for a, b in combinations(terms, 2)])


def broadcast(fn: Any, *args: Any) -> List[Expr]:
    """Apply a binary/n-ary combinator elementwise.

    Scalar arguments are repeated against list arguments, which must all
    share the same (flattened) length:

        broadcast(le, 1, q)   # [1 <= q_1, 1 <= q_2, ...]
    """
    cols = [as_list(a) for a in args]
    n = max(len(c) for c in cols)
    for c in cols:
        if len(c) not in (1, n):
            raise ArityMismatch(f"Cannot broadcast operands of length {len(c)} and {n}")
    return [fn(*(c[0] if len(c) == 1 else c[i] for c in cols)) for i in range(n)]
