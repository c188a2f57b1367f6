"""
rxstate Store Facade
====================

Both engines (RxStore and DispatchStore) expose the same contract: a stream of
State plus path-typed accessors derived from it. Callers written against
StoreType do not care which engine backs a store.

Core Components
---------------

**StoreType**: the minimal contract, a ``state_stream`` property.

**NodeStreams**: mixin adding ``value_at_node``, ``string_at_node``,
``number_at_node``, ``boolean_at_node`` and ``instance_at_node`` on top of any
``state_stream``.

**Wrapper**: adapts any StoreType (including third-party objects that only
expose ``state_stream``) to the full accessor set.

**Provider**: bundles a store with the path separator its consumers should use
to build paths.

Basic Usage
-----------

```python
from rxstate import Wrapper

wrapper = Wrapper(store)
wrapper.string_at_node("user.name").subscribe(
    lambda result: print(result.value)
)
```
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Type, TypeVar

from reactivex import Observable

from . import projection
from .config import SUBSTATE_SEPARATOR
from .result import Result
from .tree import State, join_path

T = TypeVar("T")


class StoreType(ABC):
    """Anything exposing a stream of State."""

    @property
    @abstractmethod
    def state_stream(self) -> Observable[State]:
        """
        Stream that emits states sequentially as actions are reduced onto
        previous states. New subscribers receive the latest state first.
        """
        pass


class NodeStreams(StoreType):
    """Typed, deduplicated node accessors derived from state_stream."""

    def value_at_node(self, path: str) -> Observable[Result[Any]]:
        return projection.value_at_node(self.state_stream, path)

    def string_at_node(self, path: str) -> Observable[Result[str]]:
        return projection.string_at_node(self.state_stream, path)

    def number_at_node(self, path: str) -> Observable[Result[float]]:
        return projection.number_at_node(self.state_stream, path)

    def boolean_at_node(self, path: str) -> Observable[Result[bool]]:
        return projection.boolean_at_node(self.state_stream, path)

    def instance_at_node(self, path: str, cls: Type[T]) -> Observable[Result[T]]:
        return projection.instance_at_node(self.state_stream, path, cls)

    def to_wrapper(self) -> "Wrapper":
        return Wrapper(self)


class Wrapper(NodeStreams):
    """
    Uniform facade over any store.

    The wrapped object only needs a ``state_stream`` attribute; the accessors
    come from NodeStreams.
    """

    def __init__(self, store: StoreType):
        self._store = store

    @property
    def store(self) -> StoreType:
        return self._store

    @property
    def state_stream(self) -> Observable[State]:
        return self._store.state_stream

    def to_wrapper(self) -> "Wrapper":
        return self

    def __repr__(self) -> str:
        return f"Wrapper({self._store!r})"


@dataclass(frozen=True)
class Provider:
    """A store handed to consumers together with its path separator."""

    store: StoreType
    substate_separator: str = SUBSTATE_SEPARATOR

    def path(self, *segments: str) -> str:
        """Build a full value path from segments."""
        return join_path(*segments, separator=self.substate_separator)

    def wrapper(self) -> Wrapper:
        return Wrapper(self.store)
