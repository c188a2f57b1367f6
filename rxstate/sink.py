"""
rxstate Sink - Push-Only Ingress and Subscribe-Only Egress
==========================================================

A reactivex Subject is both an observer and an observable. The stores split
those two roles:

- **Sink**: accepts pushed values and nothing else. It never signals completion
  or failure to the streams it feeds: ``on_error`` and ``on_completed`` are
  dropped. Wiring an upstream into a Sink (``upstream.subscribe(sink)``)
  therefore cannot end the action stream of a store.
- **as_source()**: a read-only view of a subject. Callers can subscribe but
  have no handle to push values.
"""

import logging
from typing import Optional, TypeVar

import reactivex
from reactivex import Observable, abc
from reactivex.subject import Subject

logger = logging.getLogger(__name__)

T = TypeVar("T")


def as_source(source: Observable[T]) -> Observable[T]:
    """Return an observable that forwards subscriptions to source and hides its observer side."""

    def subscribe(
        observer: abc.ObserverBase[T], scheduler: Optional[abc.SchedulerBase] = None
    ) -> abc.DisposableBase:
        return source.subscribe(observer, scheduler=scheduler)

    return reactivex.create(subscribe)


class Sink(abc.ObserverBase[T]):
    """Observer that forwards values and never terminates its subscribers."""

    def __init__(self) -> None:
        self._subject: Subject[T] = Subject()

    def on_next(self, value: T) -> None:
        self._subject.on_next(value)

    def on_error(self, error: Exception) -> None:
        logger.debug("Sink dropped error signal: %r", error)

    def on_completed(self) -> None:
        logger.debug("Sink dropped completion signal")

    def as_source(self) -> Observable[T]:
        return as_source(self._subject)

    @property
    def has_observers(self) -> bool:
        return bool(self._subject.observers)

    def __repr__(self) -> str:
        return f"Sink(observers={len(self._subject.observers)})"
