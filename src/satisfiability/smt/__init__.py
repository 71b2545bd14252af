"""SMT-LIBv2 serialization of expression trees and response parsing."""

from .serializer import SMTSerializer, literal, symbol
from .script import generate_smt2, write_smt2
from .sexpr import parse, parse_value, is_complete

__all__ = [
    "SMTSerializer",
    "literal",
    "symbol",
    "generate_smt2",
    "write_smt2",
    "parse",
    "parse_value",
    "is_complete",
]
