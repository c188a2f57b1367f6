"""
rxstate Exceptions
==================

NodeNotFound and TypeMismatch describe recoverable data conditions. They are
never raised by accessors: they travel inside a Failure result so the state
stream keeps flowing. InvalidPath and StoreLifecycleError describe programmer
misuse and are raised.
"""

from typing import Any, Optional


class StateError(Exception):
    """Base class for all rxstate errors."""

    pass


class NodeNotFound(StateError, KeyError):
    """No value exists at the requested path."""

    def __init__(self, path: str):
        super().__init__(path)
        self.path = path

    def __str__(self) -> str:
        return f"No value at {self.path!r}"


class TypeMismatch(StateError, TypeError):
    """A value exists at the requested path but has the wrong type."""

    def __init__(self, path: str, expected: Any, actual: Optional[type] = None):
        super().__init__(path, expected, actual)
        self.path = path
        self.expected = expected
        self.actual = actual

    def __str__(self) -> str:
        expected = getattr(self.expected, "__name__", str(self.expected))
        actual = getattr(self.actual, "__name__", str(self.actual))
        return f"No {expected} at {self.path!r} (found {actual})"


class InvalidPath(StateError, ValueError):
    """Raised when writing to an empty or malformed path."""

    pass


class StoreLifecycleError(StateError, RuntimeError):
    """Raised when a store is driven through an invalid lifecycle transition."""

    pass
