"""
rxstate Result - Success-or-Failure Values
==========================================

Every node accessor on a State returns a Result instead of raising. A Result is
either a Success carrying a value or a Failure carrying the exception that
explains why no value is available:

```python
from rxstate import State

state = State.empty().updating_value("user.name", "Ada")

state.string_at_node("user.name")           # Success('Ada')
state.number_at_node("user.name")           # Failure(TypeMismatch(...))
state.value_at_node("user.age").value       # None
state.value_at_node("user.age").get_or_else(0)  # 0
```

Results compare by content, which is what lets projection streams drop
consecutive duplicates.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class Result(ABC, Generic[T]):
    """Outcome of reading a value: Success(value) or Failure(error)."""

    __slots__ = ()

    @staticmethod
    def success(value: T) -> "Result[T]":
        return Success(value)

    @staticmethod
    def failure(error: BaseException) -> "Result[Any]":
        return Failure(error)

    @property
    @abstractmethod
    def is_success(self) -> bool:
        pass

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    @property
    @abstractmethod
    def value(self) -> Optional[T]:
        """The carried value, or None for a failure."""
        pass

    @property
    @abstractmethod
    def error(self) -> Optional[BaseException]:
        """The carried error, or None for a success."""
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def get_or_raise(self) -> T:
        pass

    @abstractmethod
    def map(self, fn: Callable[[T], R]) -> "Result[R]":
        pass

    @abstractmethod
    def flat_map(self, fn: Callable[[T], "Result[R]"]) -> "Result[R]":
        pass

    @abstractmethod
    def filter(self, predicate: Callable[[T], bool], error: BaseException) -> "Result[T]":
        """Keep a success only if predicate holds, otherwise fail with error."""
        pass

    @abstractmethod
    def or_else(self, alternative: "Result[T]") -> "Result[T]":
        """Return self when successful, otherwise alternative."""
        pass


class Success(Result[T]):
    __slots__ = ("_value",)

    def __init__(self, value: T):
        self._value = value

    @property
    def is_success(self) -> bool:
        return True

    @property
    def value(self) -> Optional[T]:
        return self._value

    @property
    def error(self) -> Optional[BaseException]:
        return None

    def get_or_else(self, default: T) -> T:
        return self._value

    def get_or_raise(self) -> T:
        return self._value

    def map(self, fn: Callable[[T], R]) -> Result[R]:
        return Success(fn(self._value))

    def flat_map(self, fn: Callable[[T], Result[R]]) -> Result[R]:
        return fn(self._value)

    def filter(self, predicate: Callable[[T], bool], error: BaseException) -> Result[T]:
        if predicate(self._value):
            return self
        return Failure(error)

    def or_else(self, alternative: Result[T]) -> Result[T]:
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Success):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(("success", self._value))

    def __repr__(self) -> str:
        return f"Success({self._value!r})"


class Failure(Result[Any]):
    __slots__ = ("_error",)

    def __init__(self, error: BaseException):
        self._error = error

    @property
    def is_success(self) -> bool:
        return False

    @property
    def value(self) -> None:
        return None

    @property
    def error(self) -> BaseException:
        return self._error

    def get_or_else(self, default: T) -> T:
        return default

    def get_or_raise(self) -> Any:
        raise self._error

    def map(self, fn: Callable[[Any], R]) -> Result[R]:
        return self

    def flat_map(self, fn: Callable[[Any], Result[R]]) -> Result[R]:
        return self

    def filter(self, predicate: Callable[[Any], bool], error: BaseException) -> Result[Any]:
        return self

    def or_else(self, alternative: Result[T]) -> Result[T]:
        return alternative

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Failure):
            return NotImplemented
        return (
            type(self._error) is type(other._error)
            and self._error.args == other._error.args
        )

    def __hash__(self) -> int:
        return hash(("failure", type(self._error)))

    def __repr__(self) -> str:
        return f"Failure({self._error!r})"
