"""
rxstate RxStore - Reducer-Stream Engine
=======================================

An RxStore folds many independent producer streams into one state stream.

Setup
-----

1. Create subjects (or any observables) that emit values or Actions.
2. Pair each with a reducer using ``create_reducer``.
3. Hand the resulting transition streams to ``RxStore`` (or ``create``).
4. Push values on the subjects; each one is reduced onto the latest state and
   the new StateInfo is emitted to every subscriber.

```python
from reactivex.subject import Subject
from rxstate import Result, RxStore, create_reducer

clicks = Subject()

def count(state, action):
    return state.mapping_value(
        "clicks", lambda r: r.map(lambda v: v + 1).or_else(Result.success(1))
    )

store = RxStore(create_reducer(clicks, count))
clicks.on_next("click")
store.last_state.value_at_node("clicks").value  # 1
```

Ordering
--------

Transitions from all producers are merged in arrival order and applied one at
a time by a single scan, so states form a total order. Events from one producer
keep their relative order. When the store connects, producers that replay a
current value (BehaviorSubject, ReplaySubject) deliver it in the order the
reducer streams were passed in.

Lifetime
--------

RxStore connects its pipeline once, at construction. Subscribers share that
single fold and a late subscriber receives the most recent StateInfo
immediately. ``dispose()`` releases the connection; it is safe to call more
than once.
"""

import logging
from typing import Optional

import reactivex
from reactivex import Observable, abc
from reactivex import operators as ops
from reactivex.disposable import CompositeDisposable

from .action import Action, ActionLike, Reducer, StateInfo, Transition
from .sink import as_source
from .store import NodeStreams
from .tree import State

logger = logging.getLogger(__name__)


def create_reducer(source: Observable[ActionLike], reducer: Reducer) -> Observable[Transition]:
    """
    Turn a stream of values into a stream of transition functions.

    Each emitted transition closes over one incoming value and the reducer; it
    maps the previous StateInfo to the next one and records the Action that
    caused it. Raw values are tagged through Action.of().
    """

    def to_transition(item: ActionLike) -> Transition:
        action = Action.of(item)

        def transition(info: StateInfo) -> StateInfo:
            return StateInfo(reducer(info.state, action), action)

        return transition

    return source.pipe(ops.map(to_transition))


def _isolate(reducer: Observable[Transition]) -> Observable[Transition]:
    # A failed producer ends like a completed one; the others keep running.
    def on_failure(error: Exception, _: Observable[Transition]) -> Observable[Transition]:
        logger.debug("Reducer stream failed and was detached: %r", error)
        return reactivex.empty()

    return reducer.pipe(ops.catch(on_failure))


def _fold(
    initial_state: Optional[State],
    reducers: tuple,
    scheduler: Optional[abc.SchedulerBase],
) -> Observable[StateInfo]:
    seed = StateInfo(initial_state if initial_state is not None else State.empty())
    folded = reactivex.merge(*(_isolate(r) for r in reducers)).pipe(
        ops.scan(lambda info, transition: transition(info), seed),
        ops.start_with(seed),
    )
    if scheduler is not None:
        folded = folded.pipe(ops.observe_on(scheduler))
    return folded


def create(
    initial_state: Optional[State],
    *reducers: Observable[Transition],
    scheduler: Optional[abc.SchedulerBase] = None,
) -> Observable[StateInfo]:
    """
    Merge transition streams and fold them into a shared StateInfo stream.

    The result starts with ``StateInfo(initial_state)`` and replays its latest
    value to late subscribers. The fold runs while at least one subscriber is
    attached; use RxStore for a store that stays connected on its own.

    Args:
        initial_state: Seed state, None for an empty State
        *reducers: Streams produced by create_reducer()
        scheduler: Optional scheduler on which states are delivered
    """
    return _fold(initial_state, reducers, scheduler).pipe(
        ops.replay(buffer_size=1),
        ops.ref_count(),
    )


class RxStore(NodeStreams):
    """
    Long-lived store over a set of reducer streams.

    Holds exactly one connection to the folded pipeline, so the fold runs once
    per incoming value regardless of how many subscribers observe it.
    """

    def __init__(
        self,
        *reducers: Observable[Transition],
        initial_state: Optional[State] = None,
        scheduler: Optional[abc.SchedulerBase] = None,
    ):
        self._last: Optional[StateInfo] = None
        self._stream = _fold(initial_state, reducers, scheduler).pipe(
            ops.replay(buffer_size=1)
        )
        self._subscription = CompositeDisposable()
        self._subscription.add(self._stream.subscribe(self._remember, self._on_error))
        self._subscription.add(self._stream.connect())
        logger.debug("RxStore connected to %d reducer stream(s)", len(reducers))

    def _remember(self, info: StateInfo) -> None:
        self._last = info

    def _on_error(self, error: Exception) -> None:
        logger.error("RxStore fold terminated: %r", error)

    @property
    def state_info_stream(self) -> Observable[StateInfo]:
        """Stream of (state, last_action) pairs, replaying the latest one."""
        return as_source(self._stream)

    @property
    def state_stream(self) -> Observable[State]:
        return self._stream.pipe(ops.map(lambda info: info.state))

    @property
    def last_state_info(self) -> Optional[StateInfo]:
        """
        Most recently delivered StateInfo.

        None only when a scheduler defers delivery and the seed has not been
        delivered yet.
        """
        return self._last

    @property
    def last_state(self) -> Optional[State]:
        return self._last.state if self._last is not None else None

    @property
    def is_disposed(self) -> bool:
        return self._subscription.is_disposed

    def dispose(self) -> None:
        """Release the store's connection. No further states are produced."""
        if not self._subscription.is_disposed:
            logger.debug("RxStore disposed")
        self._subscription.dispose()

    def __enter__(self) -> "RxStore":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()
