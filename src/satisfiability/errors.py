"""
Error taxonomy for expression construction and solver sessions.
"""
from typing import Any, Dict, List, Optional


class SatisfiabilityError(Exception):
    """Base class for all errors raised by this package.

    Attributes:
        partial_solutions: Solutions already emitted when an enumeration was
            aborted by this error (empty outside enumeration)
    """

    def __init__(self, message: str = "", *args: Any):
        super().__init__(message, *args)
        self.partial_solutions: List[Dict[str, Any]] = []


class DuplicateName(SatisfiabilityError):
    """A leaf variable name was registered twice while duplicates are fatal."""

    def __init__(self, name: str):
        super().__init__(f"Duplicate variable name {name}")
        self.name = name


class DuplicateNameWarning(UserWarning):
    """Non-fatal diagnostic for a reused leaf variable name."""


class ArityMismatch(SatisfiabilityError, ValueError):
    """An operator received the wrong number of children."""


class TypeMismatch(SatisfiabilityError, TypeError):
    """An operand has the wrong sort for its operator (Bool vs Int)."""


class SolverUnavailable(SatisfiabilityError):
    """The configured solver backend could not be started."""


class ProtocolError(SatisfiabilityError):
    """The solver produced output that could not be interpreted."""

    def __init__(self, message: str, response: Optional[str] = None):
        super().__init__(message)
        self.response = response


class NoModelAvailable(SatisfiabilityError):
    """A model was requested without a preceding SAT result."""


class SolverTimeout(SatisfiabilityError):
    """A blocking solver call exceeded the configured deadline."""


class SolverIndeterminate(SatisfiabilityError):
    """The solver answered `unknown`."""


class SessionStateError(SatisfiabilityError):
    """An operation was attempted in a session state that does not allow it."""
