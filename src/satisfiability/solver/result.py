"""
Solver status types.
"""
from enum import Enum

from ..errors import ProtocolError


class SolverResult(Enum):
    """Result from SMT solver check."""
    SAT = "sat"
    UNSAT = "unsat"
    UNKNOWN = "unknown"

    @classmethod
    def from_response(cls, line: str) -> "SolverResult":
        """Parse a `check-sat` status line.

        Raises:
            ProtocolError: If the line is not sat/unsat/unknown
        """
        s = line.strip()
        for member in cls:
            if member.value == s:
                return member
        raise ProtocolError(f"Unexpected check-sat response: {s!r}", line)
