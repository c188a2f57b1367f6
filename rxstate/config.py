"""
rxstate configuration constants.

Stores take their per-instance settings (initial state, scheduler) as
constructor arguments. The values below are shared by every store.
"""

# Separates segments of a full value path: "a.b.c"
SUBSTATE_SEPARATOR = "."

# Name given to raw values pushed on a reducer stream without an Action
DEFAULT_ACTION_NAME = "DummyAction"

# Number of parsed paths kept in the LRU path cache
PATH_CACHE_SIZE = 1024
