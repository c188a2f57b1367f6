"""
rxstate State - Immutable Path-Addressed State Tree
===================================================

A State is a persistent nested mapping addressed by full dot-delimited paths.
Each node holds two maps:

- **values**: segment -> leaf value
- **substates**: segment -> child State

A path such as ``"a.b.c"`` walks the substates ``a`` then ``b`` and names the
value ``c`` inside the last one. Because values and substates live in separate
maps, ``"a.b.c"`` and ``"a.b.c.d"`` can hold values at the same time.

Updates never mutate. Each update copies only the nodes along the written path
and shares every other node with the previous State, so a reference held to an
old State keeps reading its old values:

```python
from rxstate import State

before = State.empty().updating_value("a.b", 1)
after = before.updating_value("a.b", 2)

before.value_at_node("a.b").value  # 1
after.value_at_node("a.b").value   # 2
```

Reads never raise. A missing path produces Failure(NodeNotFound) and a value of
the wrong type produces Failure(TypeMismatch).
"""

import numbers
import threading
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple, Type, TypeVar

from cachetools import LRUCache, cached

from .config import PATH_CACHE_SIZE, SUBSTATE_SEPARATOR
from .errors import InvalidPath, NodeNotFound, TypeMismatch
from .result import Failure, Result, Success

T = TypeVar("T")

_EMPTY_MAP: Mapping[str, Any] = MappingProxyType({})


@cached(LRUCache(maxsize=PATH_CACHE_SIZE), lock=threading.RLock())
def parse_path(path: str, separator: str = SUBSTATE_SEPARATOR) -> Tuple[str, ...]:
    """
    Split a full value path into its segments.

    Raises:
        InvalidPath: If the path is empty or contains an empty segment.
    """
    if not isinstance(path, str) or not path:
        raise InvalidPath(f"Invalid path: {path!r}")
    segments = tuple(path.split(separator))
    if not all(segments):
        raise InvalidPath(f"Path {path!r} contains an empty segment")
    return segments


def join_path(*segments: str, separator: str = SUBSTATE_SEPARATOR) -> str:
    """Join segments into a full value path, skipping empty ones."""
    return separator.join(segment for segment in segments if segment)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but is never reported as a number
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


class State:
    """
    Immutable tree of values and substates.

    Instances are created with State.empty() or State.from_key_values() and
    derived with the updating_*/mapping_*/removing_* methods, which always
    return a new State.
    """

    __slots__ = ("_values", "_substates")

    def __init__(
        self,
        values: Optional[Mapping[str, Any]] = None,
        substates: Optional[Mapping[str, "State"]] = None,
    ):
        self._values = MappingProxyType(dict(values)) if values else _EMPTY_MAP
        self._substates = MappingProxyType(dict(substates)) if substates else _EMPTY_MAP

    @classmethod
    def _from_maps(cls, values: Mapping[str, Any], substates: Mapping[str, "State"]) -> "State":
        # Adopts already-immutable maps without copying them again
        state = cls.__new__(cls)
        state._values = values if values else _EMPTY_MAP
        state._substates = substates if substates else _EMPTY_MAP
        return state

    @classmethod
    def empty(cls) -> "State":
        return _EMPTY_STATE

    @classmethod
    def from_key_values(cls, entries: Mapping[str, Any]) -> "State":
        """
        Build a State from a mapping of full paths to values.

        This is the inverse of flatten():
        ``State.from_key_values(state.flatten()) == state``.
        """
        state = cls.empty()
        for path, value in entries.items():
            state = state.updating_value(path, value)
        return state

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    @property
    def values(self) -> Mapping[str, Any]:
        """Read-only view of the values held directly by this node."""
        return self._values

    @property
    def substates(self) -> Mapping[str, "State"]:
        """Read-only view of the child states held directly by this node."""
        return self._substates

    @property
    def is_empty(self) -> bool:
        return not self._values and not self._substates

    def _walk(self, segments: Tuple[str, ...]) -> Optional["State"]:
        node = self
        for segment in segments:
            node = node._substates.get(segment)
            if node is None:
                return None
        return node

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def value_at_node(self, path: str) -> Result[Any]:
        """Return the value stored at path, or Failure(NodeNotFound)."""
        try:
            segments = parse_path(path)
        except InvalidPath:
            return Failure(NodeNotFound(path))

        parent = self._walk(segments[:-1])
        if parent is None or segments[-1] not in parent._values:
            return Failure(NodeNotFound(path))
        return Success(parent._values[segments[-1]])

    def _typed_value_at_node(
        self, path: str, check: Callable[[Any], bool], expected: Any
    ) -> Result[Any]:
        result = self.value_at_node(path)
        if result.is_success and not check(result.value):
            return Failure(TypeMismatch(path, expected, type(result.value)))
        return result

    def string_at_node(self, path: str) -> Result[str]:
        return self._typed_value_at_node(path, lambda v: isinstance(v, str), str)

    def number_at_node(self, path: str) -> Result[float]:
        return self._typed_value_at_node(path, _is_number, numbers.Real)

    def boolean_at_node(self, path: str) -> Result[bool]:
        return self._typed_value_at_node(path, lambda v: isinstance(v, bool), bool)

    def instance_at_node(self, path: str, cls: Type[T]) -> Result[T]:
        """Return the value at path if it is an instance of cls."""
        return self._typed_value_at_node(path, lambda v: isinstance(v, cls), cls)

    def substate_at_node(self, path: str) -> Result["State"]:
        """Return the child State rooted at path, or Failure(NodeNotFound)."""
        try:
            segments = parse_path(path)
        except InvalidPath:
            return Failure(NodeNotFound(path))

        node = self._walk(segments)
        if node is None:
            return Failure(NodeNotFound(path))
        return Success(node)

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def _replacing(
        self, segments: Tuple[str, ...], update: Callable[["State"], "State"]
    ) -> "State":
        """
        Copy-on-write along segments: rebuild each node on the path and share
        the rest.
        """
        if not segments:
            return update(self)

        head, rest = segments[0], segments[1:]
        child = self._substates.get(head, _EMPTY_STATE)
        new_child = child._replacing(rest, update)
        if new_child is child:
            return self

        substates = dict(self._substates)
        if new_child.is_empty:
            substates.pop(head, None)
        else:
            substates[head] = new_child
        return State._from_maps(self._values, MappingProxyType(substates))

    def updating_value(self, path: str, value: Any) -> "State":
        """Return a new State with value stored at path."""
        segments = parse_path(path)
        name = segments[-1]

        def put(node: "State") -> "State":
            values = dict(node._values)
            values[name] = value
            return State._from_maps(MappingProxyType(values), node._substates)

        return self._replacing(segments[:-1], put)

    def removing_value(self, path: str) -> "State":
        """Return a new State without the value at path."""
        segments = parse_path(path)
        name = segments[-1]

        def drop(node: "State") -> "State":
            if name not in node._values:
                return node
            values = dict(node._values)
            del values[name]
            return State._from_maps(MappingProxyType(values), node._substates)

        return self._replacing(segments[:-1], drop)

    def mapping_value(
        self, path: str, fn: Callable[[Result[Any]], Result[Any]]
    ) -> "State":
        """
        Rewrite the value at path from its current Result.

        fn receives Success(current) or Failure(NodeNotFound). A Success
        return value is written back, a Failure removes the value.

        Example:
            ```python
            increment = lambda r: r.map(lambda v: v + 1).or_else(Result.success(1))
            state = state.mapping_value("counter", increment)
            ```
        """
        result = fn(self.value_at_node(path))
        if result.is_success:
            return self.updating_value(path, result.value)
        return self.removing_value(path)

    def updating_substate(self, path: str, substate: "State") -> "State":
        """Return a new State with substate grafted at path."""
        segments = parse_path(path)
        return self._replacing(segments, lambda _: substate)

    def removing_substate(self, path: str) -> "State":
        """Return a new State without the subtree at path."""
        segments = parse_path(path)
        return self._replacing(segments, lambda _: _EMPTY_STATE)

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def _items(self, prefix: str) -> Iterator[Tuple[str, Any]]:
        for name, value in self._values.items():
            yield join_path(prefix, name), value
        for name, child in self._substates.items():
            yield from child._items(join_path(prefix, name))

    def flatten(self) -> Dict[str, Any]:
        """Return a dict mapping every full value path to its value."""
        return dict(self._items(""))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, State):
            return NotImplemented
        if self is other:
            return True
        return dict(self._values) == dict(other._values) and dict(
            self._substates
        ) == dict(other._substates)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"State({self.flatten()!r})"


_EMPTY_STATE = State()
