"""
Evaluation of expression trees from leaf values.

Unassigned values propagate as None (three-valued logic), so an expression
is only decided when enough of its leaves are known.
"""
from typing import Any, Callable, Dict, List, Mapping

from .node import Expr, Op, Value, as_list


def _and(vals: List[Value]) -> Value:
    if any(v is False for v in vals):
        return False
    if all(v is True for v in vals):
        return True
    return None


def _or(vals: List[Value]) -> Value:
    if any(v is True for v in vals):
        return True
    if all(v is False for v in vals):
        return False
    return None


def _xor(vals: List[Value]) -> Value:
    if any(v is None for v in vals):
        return None
    return sum(bool(v) for v in vals) % 2 == 1


def _implies(vals: List[Value]) -> Value:
    a, b = vals
    if a is False or b is True:
        return True
    if a is True and b is False:
        return False
    return None


def _ite(vals: List[Value]) -> Value:
    cond, then, otherwise = vals
    if cond is None:
        return then if then is not None and then == otherwise else None
    return then if cond else otherwise


def _strict(fn: Callable[..., Any]) -> Callable[[List[Value]], Value]:
    def apply(vals: List[Value]) -> Value:
        if any(v is None for v in vals):
            return None
        return fn(*vals)
    return apply


def _sub(first, *rest):
    return first - sum(rest)


_APPLY: Dict[Op, Callable[[List[Value]], Value]] = {
    Op.NOT: _strict(lambda a: not a),
    Op.AND: _and,
    Op.OR: _or,
    Op.XOR: _xor,
    Op.IFF: _strict(lambda a, b: bool(a) == bool(b)),
    Op.IMPLIES: _implies,
    Op.ITE: _ite,
    Op.EQ: _strict(lambda a, b: a == b),
    Op.NE: _strict(lambda a, b: a != b),
    Op.LE: _strict(lambda a, b: a <= b),
    Op.LT: _strict(lambda a, b: a < b),
    Op.GE: _strict(lambda a, b: a >= b),
    Op.GT: _strict(lambda a, b: a > b),
    Op.ADD: _strict(lambda *xs: sum(xs)),
    Op.SUB: _strict(_sub),
}


def evaluate(expr: Expr) -> Value:
    """Compute the value of an expression from its leaves, without storing it."""
    if expr.is_leaf():
        return expr.value
    return _APPLY[expr.op]([evaluate(c) for c in expr.children])


def _assign(expr: Expr, values: Mapping[str, Value]) -> Value:
    if expr.op == Op.IDENTITY:
        if expr.name in values:
            expr.value = values[expr.name]
        return expr.value
    if expr.op == Op.CONST:
        return expr.value
    expr.value = _APPLY[expr.op]([_assign(c, values) for c in expr.children])
    return expr.value


def assign(exprs: Any, values: Mapping[str, Value]) -> None:
    """Set variable values by name and store derived values on every node.

    Variables absent from `values` keep their current value.
    """
    for root in as_list(exprs):
        _assign(root, values)


def clear(exprs: Any) -> None:
    """Reset every variable and compound node back to unassigned."""
    for root in as_list(exprs):
        _clear(root)


def _clear(expr: Expr) -> None:
    if expr.op != Op.CONST:
        expr.value = None
    for c in expr.children:
        _clear(c)
