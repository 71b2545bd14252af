"""Minimal S-expression reader for SMT-LIB solver responses.

Solvers answer `(get-value ...)` with a parenthesised list of `(term value)`
pairs that may span several lines, and report failures as `(error "...")`.
"""

from __future__ import annotations

import re
from typing import Any, Iterator, List, Union

from ..errors import ProtocolError

SExpr = Union[str, List["SExpr"]]

_NUMERAL = re.compile(r"\d+")


class StringLiteral(str):
    """A `"..."` literal (kept apart from symbols)."""


class IncompleteInput(ProtocolError):
    """Raised when input ends inside a string, quoted symbol or open list."""


def tokenize(text: str) -> Iterator[str]:
    i, n = 0, len(text)
    while i < n:
        ch = text[i]
        if ch.isspace():
            i += 1
        elif ch == ";":
            nl = text.find("\n", i)
            i = n if nl < 0 else nl + 1
        elif ch in "()":
            yield ch
            i += 1
        elif ch == "|":
            end = text.find("|", i + 1)
            if end < 0:
                raise IncompleteInput("unterminated quoted symbol")
            yield text[i:end + 1]
            i = end + 1
        elif ch == '"':
            j = i + 1
            while True:
                end = text.find('"', j)
                if end < 0:
                    raise IncompleteInput("unterminated string literal")
                # "" is an escaped quote inside SMT-LIB strings
                if end + 1 < n and text[end + 1] == '"':
                    j = end + 2
                    continue
                break
            yield text[i:end + 1]
            i = end + 1
        else:
            j = i
            while j < n and not text[j].isspace() and text[j] not in '();|"':
                j += 1
            yield text[i:j]
            i = j


def _atom(token: str) -> SExpr:
    if token.startswith("|"):
        return token[1:-1]
    if token.startswith('"'):
        return StringLiteral(token[1:-1].replace('""', '"'))
    return token


def parse(text: str) -> List[SExpr]:
    """Parse all top-level S-expressions in `text`."""
    stack: List[List[SExpr]] = [[]]
    for tok in tokenize(text):
        if tok == "(":
            stack.append([])
        elif tok == ")":
            if len(stack) == 1:
                raise ProtocolError("unbalanced ')' in solver response", text)
            done = stack.pop()
            stack[-1].append(done)
        else:
            stack[-1].append(_atom(tok))
    if len(stack) != 1:
        raise IncompleteInput("unbalanced '(' in solver response")
    return stack[0]


def is_complete(text: str) -> bool:
    """True when `text` holds at least one full S-expression."""
    try:
        return len(parse(text)) > 0
    except IncompleteInput:
        return False


def error_message(item: SExpr) -> Any:
    """Return the message of an `(error "...")` response, or None."""
    if isinstance(item, list) and len(item) >= 1 and item[0] == "error":
        return item[1] if len(item) > 1 else ""
    return None


def parse_value(item: SExpr) -> Union[bool, int]:
    """Convert an SMT-LIB Bool or Int value into a Python value."""
    if item == "true":
        return True
    if item == "false":
        return False
    if isinstance(item, str) and not isinstance(item, StringLiteral) and _NUMERAL.fullmatch(item):
        return int(item)
    if (isinstance(item, list) and len(item) == 2 and item[0] == "-"
            and isinstance(item[1], str) and _NUMERAL.fullmatch(item[1])):
        return -int(item[1])
    raise ProtocolError(f"Unsupported value in solver response: {item!r}")
