"""
Registry of leaf variable names.

A process-wide default registry is created at import time; tests and
independent problem instances call `reset_registry()` to start clean.
Constructors also accept an explicit registry handle.
"""
from typing import Optional, Set
import warnings

from ..errors import DuplicateName, DuplicateNameWarning


class NameRegistry:
    """Set of previously used leaf names plus duplicate-handling flags.

    Attributes:
        warn_duplicates: Emit a DuplicateNameWarning on reuse
        fatal: Raise DuplicateName on reuse instead of warning
    """

    def __init__(self, warn_duplicates: bool = True, fatal: bool = False):
        self.warn_duplicates = warn_duplicates
        self.fatal = fatal
        self._names: Set[str] = set()

    def register(self, name: str) -> bool:
        """Register a leaf name.

        Args:
            name: Leaf variable name

        Returns:
            True if the name was already registered, False otherwise

        Raises:
            DuplicateName: If the name is reused and the registry is fatal
        """
        if name in self._names:
            if self.fatal:
                raise DuplicateName(name)
            if self.warn_duplicates:
                warnings.warn(f"Duplicate variable name {name}", DuplicateNameWarning, stacklevel=3)
            return True
        self._names.add(name)
        return False

    def reset(self) -> None:
        """Forget every registered name."""
        self._names.clear()

    def __contains__(self, name: str) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)


_DEFAULT_REGISTRY = NameRegistry()


def default_registry() -> NameRegistry:
    return _DEFAULT_REGISTRY


def resolve_registry(registry: Optional[NameRegistry]) -> NameRegistry:
    return registry if registry is not None else _DEFAULT_REGISTRY


def reset_registry() -> None:
    """Clear the process-wide registry (names only, flags are kept)."""
    _DEFAULT_REGISTRY.reset()


def set_duplicate_name_warning(enabled: bool, fatal: bool = False) -> None:
    """Configure duplicate-name handling of the process-wide registry."""
    _DEFAULT_REGISTRY.warn_duplicates = enabled
    _DEFAULT_REGISTRY.fatal = fatal
