"""
Expression to SMT-LIBv2 serializer.

Translates expression trees to SMT-LIB terms with:
- Sort inference for untyped variables from how they are used
- Per-session tracking of declared constants
- A fixed operator mapping for Boolean and integer operators
"""
import re
from typing import Dict, List, Optional

from ..errors import TypeMismatch
from ..expr.node import ARITH_OPS, COMPARE_OPS, LOGIC_OPS, Expr, Op, Sort

_SIMPLE_SYMBOL = re.compile(r"[A-Za-z~!@$%^&*_+=<>.?/\-][A-Za-z0-9~!@$%^&*_+=<>.?/\-]*")

_RESERVED = frozenset({
    "_", "!", "as", "let", "exists", "forall", "match", "par",
    "true", "false", "not", "and", "or", "xor", "ite", "distinct",
    "BINARY", "DECIMAL", "HEXADECIMAL", "NUMERAL", "STRING",
})

_OP_MAP = {
    Op.NOT: "not",
    Op.AND: "and",
    Op.OR: "or",
    Op.XOR: "xor",
    Op.IFF: "=",
    Op.IMPLIES: "=>",
    Op.ITE: "ite",
    Op.EQ: "=",
    Op.NE: "distinct",
    Op.LE: "<=",
    Op.LT: "<",
    Op.GE: ">=",
    Op.GT: ">",
    Op.ADD: "+",
    Op.SUB: "-",
}

# Single-child nodes of these print as the child itself.
_UNWRAP_SINGLE = frozenset({Op.AND, Op.OR, Op.XOR, Op.ADD})


def symbol(name: str) -> str:
    """Render a variable name as an SMT-LIB symbol, quoting when needed."""
    if _SIMPLE_SYMBOL.fullmatch(name) and name not in _RESERVED:
        return name
    if "|" in name or "\\" in name:
        raise TypeMismatch(f"Variable name {name!r} cannot be written as an SMT-LIB symbol")
    return f"|{name}|"


def literal(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value < 0:
        return f"(- {-value})"
    return str(value)


class SMTSerializer:
    """Serializes expressions into SMT-LIB commands for one solver session.

    Attributes:
        declared: Sorts of the constants already declared in this session
    """

    def __init__(self):
        self.declared: Dict[str, Sort] = {}

    def sort_of(self, name: str) -> Optional[Sort]:
        return self.declared.get(name)

    def declared_names(self) -> List[str]:
        return list(self.declared)

    def infer_sorts(self, expr: Expr) -> Dict[str, Sort]:
        """Infer the sort of every variable in an asserted expression.

        Returns:
            Mapping of variable name to sort, in first-use order

        Raises:
            TypeMismatch: If a variable is used both as Bool and Int, or its
                use conflicts with its declared sort
        """
        sorts: Dict[str, Sort] = {}
        self._infer(expr, Sort.BOOL, sorts)
        return sorts

    def _infer(self, expr: Expr, expected: Sort, sorts: Dict[str, Sort]) -> None:
        op = expr.op
        if op == Op.IDENTITY:
            for source, known in (("declared", expr.sort),
                                  ("session", self.declared.get(expr.name)),
                                  ("use", sorts.get(expr.name))):
                if known is not None and known != expected:
                    raise TypeMismatch(
                        f"Variable '{expr.name}' is used as {expected.value} "
                        f"but its {source} sort is {known.value}")
            sorts.setdefault(expr.name, expected)
            return

        if op == Op.CONST:
            if expr.sort != expected:
                raise TypeMismatch(
                    f"Constant {expr.name} is {expr.sort.value} where {expected.value} is expected")
            return

        if op == Op.ITE:
            cond, then, otherwise = expr.children
            self._infer(cond, Sort.BOOL, sorts)
            self._infer(then, expected, sorts)
            self._infer(otherwise, expected, sorts)
            return

        if op in LOGIC_OPS or op in COMPARE_OPS:
            produced, operand = Sort.BOOL, (Sort.BOOL if op in LOGIC_OPS else Sort.INT)
        elif op in ARITH_OPS:
            produced, operand = Sort.INT, Sort.INT
        else:
            raise ValueError(f"Unsupported operator: {op}")

        if produced != expected:
            raise TypeMismatch(
                f"'{expr.name}' is {produced.value} where {expected.value} is expected")
        for child in expr.children:
            self._infer(child, operand, sorts)

    def declarations(self, expr: Expr) -> List[str]:
        """Declarations for variables of `expr` not yet declared in this session."""
        sorts = self.infer_sorts(expr)
        new = {name: sort for name, sort in sorts.items() if name not in self.declared}
        lines = [f"(declare-const {symbol(name)} {sort.value})" for name, sort in new.items()]
        self.declared.update(new)
        return lines

    def term(self, expr: Expr) -> str:
        """Translate an expression to an SMT-LIB term."""
        op = expr.op
        if op == Op.IDENTITY:
            return symbol(expr.name)
        if op == Op.CONST:
            return literal(expr.value)
        if op in _UNWRAP_SINGLE and len(expr.children) == 1:
            return self.term(expr.children[0])

        smt_op = _OP_MAP.get(op)
        if smt_op is None:
            raise ValueError(f"Unsupported operator: {op}")
        args = " ".join(self.term(c) for c in expr.children)
        return f"({smt_op} {args})"

    def serialize_assertion(self, expr: Expr) -> str:
        """Declarations (if any) followed by `(assert ...)`, one command per line."""
        body = self.term(expr)
        lines = self.declarations(expr)
        lines.append(f"(assert {body})")
        return "\n".join(lines)
