"""
rxstate DispatchStore - Dispatch Engine
=======================================

A DispatchStore centralises every change behind one ingress. Producers build
DispatchAction records and call ``dispatch``; a single reducer folds them onto
the current state.

Lifecycle
---------

``UNINITIALIZED -> INITIALIZED -> DEINITIALIZED``

- ``initialize(reducer, scheduler)`` wires the action ingress through the fold
  into the current-state cell. It may be called once.
- ``deinitialize()`` releases the fold. Later dispatches are accepted and
  ignored: the store is quiescent, not broken.

Delivery
--------

When a scheduler is supplied, reduction and the resulting notifications run on
it instead of on the dispatching caller's stack:

```python
from reactivex.scheduler import HistoricalScheduler
from rxstate import DispatchAction, create_default

scheduler = HistoricalScheduler()
store = create_default(reducer, scheduler=scheduler)
store.dispatch(DispatchAction("add", "a.b", 1))
scheduler.start()  # reducer runs here
```

The ingress is a Sink: it never completes and never fails, so no upstream
wired into ``action_trigger`` can end the action stream of the store.
"""

import logging
from enum import Enum
from typing import Any, Optional

from reactivex import Observable, abc
from reactivex import operators as ops
from reactivex.disposable import CompositeDisposable
from reactivex.subject import BehaviorSubject

from .action import DispatchAction, Reducer
from .errors import StoreLifecycleError
from .sink import Sink, as_source
from .store import NodeStreams
from .tree import State

logger = logging.getLogger(__name__)


class Lifecycle(Enum):
    """State machine of a DispatchStore."""

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    DEINITIALIZED = "deinitialized"  # terminal


class DispatchStore(NodeStreams):
    """
    Centralised storage for state; dispatched actions are reduced onto it.

    The current-state cell has a single writer, the fold attached by
    initialize(), and any number of readers through state_stream and
    last_state.
    """

    def __init__(self, initial_state: Optional[State] = None):
        self._actions: Sink[DispatchAction] = Sink()
        self._state = BehaviorSubject(
            initial_state if initial_state is not None else State.empty()
        )
        self._subscription = CompositeDisposable()
        self._lifecycle = Lifecycle.UNINITIALIZED

    @property
    def lifecycle(self) -> Lifecycle:
        return self._lifecycle

    @property
    def action_trigger(self) -> Sink[DispatchAction]:
        """Push-only ingress. Equivalent to calling dispatch() per value."""
        return self._actions

    @property
    def action_stream(self) -> Observable[DispatchAction]:
        """Read-only stream of every dispatched action."""
        return self._actions.as_source()

    @property
    def state_stream(self) -> Observable[State]:
        return as_source(self._state)

    @property
    def last_state(self) -> State:
        """Most recently folded State, readable synchronously."""
        return self._state.value

    def initialize(self, reducer: Reducer, scheduler: Optional[abc.SchedulerBase] = None) -> None:
        """
        Attach the fold. Must be called exactly once.

        Args:
            reducer: ``(State, DispatchAction) -> State``
            scheduler: Optional scheduler on which reduction and state
                notifications run

        Raises:
            StoreLifecycleError: If the store was already initialized or
                deinitialized
        """
        if self._lifecycle is not Lifecycle.UNINITIALIZED:
            raise StoreLifecycleError(
                f"Cannot initialize a store that is {self._lifecycle.value}"
            )

        actions = self.action_stream
        if scheduler is not None:
            actions = actions.pipe(ops.observe_on(scheduler))

        fold = actions.pipe(ops.scan(reducer, self.last_state))
        self._subscription.add(fold.subscribe(self._state.on_next))
        self._lifecycle = Lifecycle.INITIALIZED
        logger.debug("DispatchStore initialized")

    def deinitialize(self) -> None:
        """Release the fold. Safe to call repeatedly."""
        if self._lifecycle is Lifecycle.DEINITIALIZED:
            return
        self._subscription.dispose()
        self._lifecycle = Lifecycle.DEINITIALIZED
        logger.debug("DispatchStore deinitialized")

    def dispatch(self, action: DispatchAction[Any]) -> None:
        """Push action into the ingress. Never blocks and returns nothing."""
        if self._lifecycle is not Lifecycle.INITIALIZED:
            logger.debug(
                "Action %r dispatched to a %s store", action.id, self._lifecycle.value
            )
        self._actions.on_next(action)

    def __enter__(self) -> "DispatchStore":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.deinitialize()


def create_default(
    reducer: Reducer,
    initial_state: Optional[State] = None,
    scheduler: Optional[abc.SchedulerBase] = None,
) -> DispatchStore:
    """Create and initialize a DispatchStore."""
    store = DispatchStore(initial_state)
    store.initialize(reducer, scheduler)
    return store
