"""
rxstate Projections - Typed, Deduplicated Views of a State Stream
=================================================================

Each function here turns an ``Observable[State]`` into an
``Observable[Result]`` that tracks a single path:

```python
from rxstate import projection

projection.number_at_node(store.state_stream, "cart.total").subscribe(
    lambda result: print(result.get_or_else(0))
)
```

Consecutive emissions whose extracted ``.value`` has the same type and
compares equal are dropped, so a subscriber watching one path is not notified
when an unrelated path changes. A run of failures collapses into a single
failure for the same reason (their ``.value`` is None).
"""

import logging
from typing import Any, Callable, Optional, Type, TypeVar

from reactivex import Observable
from reactivex import operators as ops

from .result import Result
from .tree import State

T = TypeVar("T")

StateStream = Observable[State]


def _same_value(previous: Result[Any], current: Result[Any]) -> bool:
    # 1, True and 1.0 compare equal but are distinct values
    return (
        type(previous.value) is type(current.value)
        and previous.value == current.value
    )


def _project(
    stream: StateStream, read: Callable[[State], Result[T]]
) -> Observable[Result[T]]:
    return stream.pipe(
        ops.map(read),
        ops.distinct_until_changed(comparer=_same_value),
    )


def value_at_node(stream: StateStream, path: str) -> Observable[Result[Any]]:
    return _project(stream, lambda state: state.value_at_node(path))


def string_at_node(stream: StateStream, path: str) -> Observable[Result[str]]:
    return _project(stream, lambda state: state.string_at_node(path))


def number_at_node(stream: StateStream, path: str) -> Observable[Result[float]]:
    return _project(stream, lambda state: state.number_at_node(path))


def boolean_at_node(stream: StateStream, path: str) -> Observable[Result[bool]]:
    return _project(stream, lambda state: state.boolean_at_node(path))


def instance_at_node(
    stream: StateStream, path: str, cls: Type[T]
) -> Observable[Result[T]]:
    return _project(stream, lambda state: state.instance_at_node(path, cls))


def log_next(
    log: logging.Logger,
    label: str,
    selector: Optional[Callable[[Any], Any]] = None,
) -> Callable[[Observable[T]], Observable[T]]:
    """
    Debug tap: log every emission at DEBUG level and pass it through.

    Args:
        log: Logger to write to
        label: Prefix identifying the stream in the log
        selector: Optional function picking what to log from each emission
    """

    def tap(value: T) -> None:
        if log.isEnabledFor(logging.DEBUG):
            log.debug("%s: %r", label, selector(value) if selector else value)

    return ops.do_action(on_next=tap)
