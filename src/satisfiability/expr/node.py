"""
Expression tree nodes.

An expression is a closed tagged variant: every node carries an `Op` tag, a
tuple of children fixed at construction, a display name and an optional value
that is filled in after a model has been retrieved from a solver.
"""
from enum import Enum
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from ..errors import ArityMismatch, TypeMismatch


class Op(Enum):
    """Operator tag of an expression node."""
    IDENTITY = "identity"
    CONST = "const"
    NOT = "not"
    AND = "and"
    OR = "or"
    XOR = "xor"
    IFF = "iff"
    IMPLIES = "implies"
    ITE = "ite"
    EQ = "eq"
    NE = "ne"
    LE = "le"
    LT = "lt"
    GE = "ge"
    GT = "gt"
    ADD = "add"
    SUB = "sub"


class Sort(Enum):
    """SMT sort of a term."""
    BOOL = "Bool"
    INT = "Int"


LEAF_OPS = frozenset({Op.IDENTITY, Op.CONST})
LOGIC_OPS = frozenset({Op.NOT, Op.AND, Op.OR, Op.XOR, Op.IFF, Op.IMPLIES})
COMPARE_OPS = frozenset({Op.EQ, Op.NE, Op.LE, Op.LT, Op.GE, Op.GT})
ARITH_OPS = frozenset({Op.ADD, Op.SUB})

# Child names are sorted when deriving the display name of these.
COMMUTATIVE_OPS = frozenset({Op.AND, Op.OR, Op.XOR, Op.IFF, Op.EQ, Op.NE, Op.ADD})

# Nested nodes with the same tag are merged into their parent.
FLATTEN_OPS = frozenset({Op.AND, Op.OR, Op.XOR, Op.ADD})

# op -> (min children, max children or None for unbounded)
_ARITY = {
    Op.NOT: (1, 1),
    Op.AND: (1, None),
    Op.OR: (1, None),
    Op.XOR: (1, None),
    Op.IFF: (2, 2),
    Op.IMPLIES: (2, 2),
    Op.ITE: (3, 3),
    Op.EQ: (2, 2),
    Op.NE: (2, 2),
    Op.LE: (2, 2),
    Op.LT: (2, 2),
    Op.GE: (2, 2),
    Op.GT: (2, 2),
    Op.ADD: (1, None),
    Op.SUB: (2, None),
}

Value = Union[bool, int, None]
Operand = Union["Expr", bool, int]


class Expr:
    """A node of an expression tree.

    Attributes:
        op: Operator tag
        children: Child expressions, in construction order
        value: None while unassigned, otherwise a bool or an int
        name: Display name (user supplied for variables, derived otherwise)
        sort: Sort when known at construction, None for untyped variables
    """

    __slots__ = ("op", "children", "value", "name", "sort")

    def __init__(self,
                 op: Op,
                 children: Sequence["Expr"] = (),
                 value: Value = None,
                 name: str = "",
                 sort: Optional[Sort] = None):
        self.op = op
        self.children: Tuple[Expr, ...] = tuple(children)
        self.value = value
        self.name = name
        self.sort = sort

    def is_leaf(self) -> bool:
        return self.op in LEAF_OPS

    def is_variable(self) -> bool:
        return self.op == Op.IDENTITY

    # Structural equality

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (bool, int)):
            raise TypeMismatch(
                f"'{self.name} == {other!r}' compares structure and cannot build a constraint; "
                "use .eq() or .ne()")
        if not isinstance(other, Expr):
            return NotImplemented
        return equals(self, other)

    def __hash__(self) -> int:
        return hash((self.op, self.name))

    def __bool__(self) -> bool:
        raise TypeMismatch(
            f"Expression '{self.name}' has no truth value; "
            "combine expressions with and_/or_ instead of Python 'and'/'or' or chained comparisons")

    def __str__(self) -> str:
        return "".join(line + "\n" for line in render(self))

    def __repr__(self) -> str:
        return f"Expr({self.op.value}, {self.name!r})"

    # Logical operators

    def __invert__(self) -> "Expr":
        return combine(Op.NOT, [self])

    def __and__(self, other: Operand) -> "Expr":
        return combine(Op.AND, [self, other])

    def __rand__(self, other: Operand) -> "Expr":
        return combine(Op.AND, [other, self])

    def __or__(self, other: Operand) -> "Expr":
        return combine(Op.OR, [self, other])

    def __ror__(self, other: Operand) -> "Expr":
        return combine(Op.OR, [other, self])

    def __xor__(self, other: Operand) -> "Expr":
        return combine(Op.XOR, [self, other])

    def __rxor__(self, other: Operand) -> "Expr":
        return combine(Op.XOR, [other, self])

    def implies(self, other: Operand) -> "Expr":
        return combine(Op.IMPLIES, [self, other])

    def iff(self, other: Operand) -> "Expr":
        return combine(Op.IFF, [self, other])

    # Integer comparisons and arithmetic. `==` stays structural equality,
    # so (in)equality constraints are built with eq()/ne().

    def eq(self, other: Operand) -> "Expr":
        """Equality constraint. Python `==` between expressions is structural
        equality and returns a plain bool, never a constraint."""
        return combine(Op.EQ, [self, other])

    def ne(self, other: Operand) -> "Expr":
        return combine(Op.NE, [self, other])

    def __lt__(self, other: Operand) -> "Expr":
        return combine(Op.LT, [self, other])

    def __le__(self, other: Operand) -> "Expr":
        return combine(Op.LE, [self, other])

    def __gt__(self, other: Operand) -> "Expr":
        return combine(Op.GT, [self, other])

    def __ge__(self, other: Operand) -> "Expr":
        return combine(Op.GE, [self, other])

    def __add__(self, other: Operand) -> "Expr":
        return combine(Op.ADD, [self, other])

    def __radd__(self, other: Operand) -> "Expr":
        return combine(Op.ADD, [other, self])

    def __sub__(self, other: Operand) -> "Expr":
        return combine(Op.SUB, [self, other])

    def __rsub__(self, other: Operand) -> "Expr":
        return combine(Op.SUB, [other, self])


def constant(value: Union[bool, int]) -> Expr:
    """Create a literal leaf. Literals are never registered or declared."""
    if isinstance(value, bool):
        return Expr(Op.CONST, value=value, name="true" if value else "false", sort=Sort.BOOL)
    if isinstance(value, int):
        return Expr(Op.CONST, value=value, name=str(value), sort=Sort.INT)
    raise TypeMismatch(f"Cannot use {type(value).__name__} value {value!r} in an expression")


def lift(operand: Operand) -> Expr:
    """Wrap Python literals as constant nodes; expressions pass through."""
    if isinstance(operand, Expr):
        return operand
    return constant(operand)


def as_list(exprs: Any) -> List[Expr]:
    """Flatten (nested) collections of expressions into a list.

    A single expression is treated as a length-1 collection so that scalar
    and vector arguments can be mixed freely.
    """
    if isinstance(exprs, (Expr, bool, int)):
        return [lift(exprs)]
    if isinstance(exprs, str):
        raise TypeMismatch(f"Expected expressions, got string {exprs!r}")
    out: List[Expr] = []
    for item in exprs:
        out.extend(as_list(item))
    return out


def result_sort(expr: Expr) -> Optional[Sort]:
    """Sort produced by an expression, or None when not yet determined."""
    if expr.op in LEAF_OPS:
        return expr.sort
    if expr.op in LOGIC_OPS or expr.op in COMPARE_OPS:
        return Sort.BOOL
    if expr.op in ARITH_OPS:
        return Sort.INT
    # ITE
    return expr.sort


def _check_arity(op: Op, children: Sequence[Expr]) -> None:
    lo, hi = _ARITY[op]
    n = len(children)
    if n < lo or (hi is not None and n > hi):
        if lo == hi:
            expected = f"exactly {lo}"
        elif hi is None:
            expected = f"at least {lo}"
        else:
            expected = f"{lo} to {hi}"
        raise ArityMismatch(f"Operator '{op.value}' expects {expected} children, got {n}")


def _check_sort(op: Op, child: Expr, expected: Sort) -> None:
    actual = result_sort(child)
    if actual is not None and actual != expected:
        raise TypeMismatch(
            f"Operator '{op.value}' expects {expected.value} operands, "
            f"but '{child.name}' is {actual.value}")


def _derive_name(op: Op, children: Sequence[Expr]) -> str:
    names = [c.name for c in children]
    if op in COMMUTATIVE_OPS:
        names = sorted(names)
    return f"{op.value}_{'_'.join(names)}"


def combine(op: Op, children: Iterable[Operand]) -> Expr:
    """Create an operator node.

    Args:
        op: Operator tag (not IDENTITY or CONST)
        children: Operand expressions; Python bools and ints become constants

    Returns:
        New expression with a derived name and no value

    Raises:
        ArityMismatch: If the number of children does not fit the operator
        TypeMismatch: If an operand's known sort conflicts with the operator
    """
    if op in LEAF_OPS:
        raise ArityMismatch(f"Operator '{op.value}' is a leaf and takes no children")

    kids = [lift(c) for c in children]
    _check_arity(op, kids)

    sort: Optional[Sort] = None
    if op in LOGIC_OPS:
        for c in kids:
            _check_sort(op, c, Sort.BOOL)
    elif op in COMPARE_OPS or op in ARITH_OPS:
        for c in kids:
            _check_sort(op, c, Sort.INT)
    else:
        cond, then_, else_ = kids
        _check_sort(op, cond, Sort.BOOL)
        then_sort, else_sort = result_sort(then_), result_sort(else_)
        if then_sort is not None and else_sort is not None and then_sort != else_sort:
            raise TypeMismatch(
                f"Branches of 'ite' disagree: '{then_.name}' is {then_sort.value}, "
                f"'{else_.name}' is {else_sort.value}")
        sort = then_sort or else_sort

    if op in FLATTEN_OPS:
        flat: List[Expr] = []
        for c in kids:
            if c.op == op:
                flat.extend(c.children)
            else:
                flat.append(c)
        kids = flat

    return Expr(op, kids, name=_derive_name(op, kids), sort=sort)


def _same_value(a: Value, b: Value) -> bool:
    if a is None or b is None:
        return a is b
    return type(a) is type(b) and a == b


def _is_permutation(xs: Sequence[Expr], ys: Sequence[Expr]) -> bool:
    if len(xs) != len(ys):
        return False
    unmatched = list(ys)
    for x in xs:
        for i, y in enumerate(unmatched):
            if equals(x, y):
                del unmatched[i]
                break
        else:
            return False
    return True


def equals(a: Expr, b: Expr) -> bool:
    """Structural equality, invariant under reordering of children."""
    if a is b:
        return True
    return (a.op == b.op
            and _same_value(a.value, b.value)
            and a.name == b.name
            and _is_permutation(a.children, b.children))


def render(expr: Expr, indent: int = 0) -> Iterator[str]:
    """Yield one line per node: name, assigned value, then children indented."""
    line = " | " * indent + expr.name
    if expr.value is not None:
        line += f" = {expr.value}"
    yield line
    for child in expr.children:
        yield from render(child, indent + 1)


def iter_nodes(expr: Expr) -> Iterator[Expr]:
    """Pre-order traversal of an expression tree."""
    yield expr
    for child in expr.children:
        yield from iter_nodes(child)


def count_nodes(expr: Expr) -> int:
    return sum(1 for _ in iter_nodes(expr))


def variables(exprs: Any) -> List[Expr]:
    """Distinct variable leaves (by name) in first-use order."""
    seen = set()
    out: List[Expr] = []
    for root in as_list(exprs):
        for node in iter_nodes(root):
            if node.op == Op.IDENTITY and node.name not in seen:
                seen.add(node.name)
                out.append(node)
    return out
