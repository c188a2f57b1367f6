"""
rxstate Actions
===============

Two action shapes feed the two store engines:

- **Action(name, value)**: a tagged value travelling on a reducer stream of an
  RxStore. Producers may push either an Action or a raw value; raw values are
  tagged with DEFAULT_ACTION_NAME at the stream boundary by Action.of().
- **DispatchAction(id, full_value_path, payload)**: a fully qualified action
  pushed into a DispatchStore. ``id`` selects the reducer branch and
  ``full_value_path`` the location in the State tree.

StateInfo pairs a State with the Action that produced it.

Reducers for dispatch stores can be assembled from per-id handlers:

```python
from rxstate import handle_actions, on

reducer = handle_actions(
    on("increment", lambda s, a: s.mapping_value(a.full_value_path, add(a.payload))),
    on("rename", lambda s, a: s.updating_value(a.full_value_path, a.payload)),
)
```

Actions with any other id leave the state untouched.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar, Union

from .config import DEFAULT_ACTION_NAME
from .tree import State

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Action(Generic[T]):
    """A value tagged with a name."""

    name: str
    value: T

    @classmethod
    def of(cls, item: Union["Action[T]", T]) -> "Action[T]":
        """Return item unchanged if it is an Action, else tag it with the default name."""
        if isinstance(item, Action):
            return item
        return cls(DEFAULT_ACTION_NAME, item)


@dataclass(frozen=True)
class DispatchAction(Generic[T]):
    """An action addressed to one reducer branch and one path of the state."""

    id: str
    full_value_path: str
    payload: T


@dataclass(frozen=True)
class StateInfo(Generic[T]):
    """A State together with the action that produced it (None for the seed)."""

    state: State
    last_action: Optional[Action[T]] = None


ActionLike = Union[Action[T], T]
Reducer = Callable[[State, Any], State]
Transition = Callable[[StateInfo], StateInfo]
Handler = Callable[[State, DispatchAction], State]


def on(action_id: str, handler: Handler) -> Tuple[str, Handler]:
    """Pair an action id with the handler that reduces it."""
    return action_id, handler


def handle_actions(*handlers: Tuple[str, Handler]) -> Reducer:
    """
    Build a dispatch reducer from (action_id, handler) pairs.

    Unrecognised action ids are a no-op: the state is returned unchanged.

    Raises:
        ValueError: If the same action id is registered twice
    """
    table: Dict[str, Handler] = {}
    for action_id, handler in handlers:
        if action_id in table:
            raise ValueError(f"Duplicate handler for action {action_id!r}")
        table[action_id] = handler

    def reducer(state: State, action: DispatchAction) -> State:
        handler = table.get(action.id)
        if handler is None:
            logger.debug("Unhandled action %r", action.id)
            return state
        return handler(state, action)

    return reducer
