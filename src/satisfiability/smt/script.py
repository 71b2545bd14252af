"""SMT-LIBv2 problem generation for a set of asserted expressions.

This is solver-independent: it only emits SMT-LIBv2 text, which can be fed to
any solver on the command line.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from ..expr.node import as_list, variables
from .serializer import SMTSerializer, symbol


def generate_smt2(
    exprs: Any,
    *,
    logic: Optional[str] = None,
    check_sat: bool = True,
    get_values: bool = True,
) -> str:
    lines: list[str] = []
    roots = as_list(exprs)

    lines.append("; generated by satisfiability")
    lines.append("(set-option :produce-models true)")
    if logic:
        lines.append(f"(set-logic {logic})")
    lines.append("")

    serializer = SMTSerializer()
    decls: list[str] = []
    asserts: list[str] = []
    for root in roots:
        decls.extend(serializer.declarations(root))
        asserts.append(f"(assert {serializer.term(root)})")

    lines.extend(decls)
    lines.append("")
    lines.extend(asserts)

    if check_sat:
        lines.append("(check-sat)")
        names = [v.name for v in variables(roots) if v.name in serializer.declared]
        if get_values and names:
            lines.append(f"(get-value ({' '.join(symbol(n) for n in names)}))")

    return "\n".join(lines) + "\n"


def write_smt2(
    exprs: Any,
    out_file: str | Path,
    *,
    logic: Optional[str] = None,
    check_sat: bool = True,
    get_values: bool = True,
) -> Path:
    out_path = Path(out_file)
    out_path.write_text(
        generate_smt2(
            exprs,
            logic=logic,
            check_sat=check_sat,
            get_values=get_values,
        )
    )
    return out_path
