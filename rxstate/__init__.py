"""
rxstate - Reactive State Containers over Path-Addressed Trees

Folds streams of actions into one ordered, replayable stream of immutable
State, and projects typed, deduplicated views of individual paths.
"""

# Immutable state tree and results
from .errors import (
    InvalidPath,
    NodeNotFound,
    StateError,
    StoreLifecycleError,
    TypeMismatch,
)
from .result import Failure, Result, Success
from .tree import State, join_path, parse_path

# Actions and reducer helpers
from .action import (
    Action,
    DispatchAction,
    StateInfo,
    handle_actions,
    on,
)

# Stream plumbing
from . import projection
from .sink import Sink, as_source

# Store engines and facade
from .dispatch_store import DispatchStore, Lifecycle, create_default
from .rx_store import RxStore, create, create_reducer
from .store import NodeStreams, Provider, StoreType, Wrapper

__all__ = [
    # State tree
    "State",
    "parse_path",
    "join_path",
    "Result",
    "Success",
    "Failure",
    # Actions
    "Action",
    "DispatchAction",
    "StateInfo",
    "on",
    "handle_actions",
    # Streams
    "projection",
    "Sink",
    "as_source",
    # Engines
    "RxStore",
    "create",
    "create_reducer",
    "DispatchStore",
    "Lifecycle",
    "create_default",
    # Facade
    "StoreType",
    "NodeStreams",
    "Wrapper",
    "Provider",
    # Exceptions
    "StateError",
    "NodeNotFound",
    "TypeMismatch",
    "InvalidPath",
    "StoreLifecycleError",
]
