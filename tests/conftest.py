"""
Shared pytest fixtures and configuration for rxstate tests.
"""

import pytest
from reactivex.scheduler import HistoricalScheduler

from rxstate import DispatchAction, Result, State, handle_actions, on

NUMBER_PATH = "a.b.c.d"
STRING_PATH = "a.b.c.d.e"
BOOLEAN_PATH = "a.b.c"

NUMBERS = [1, 2, 3, 4, 5]
STRINGS = ["1", "2", "3", "4", "5"]
BOOLEANS = [True, False, True, False]


def add_to(path, amount):
    """Reducer step adding amount to the value at path, seeding it if absent."""

    def step(state: State) -> State:
        return state.mapping_value(
            path,
            lambda current: current.map(lambda v: v + amount).or_else(
                Result.success(amount)
            ),
        )

    return step


class Recorder:
    """Collects emissions of a stream."""

    def __init__(self):
        self.items = []
        self.completed = False
        self.errors = []

    def on_next(self, value):
        self.items.append(value)

    def on_error(self, error):
        self.errors.append(error)

    def on_completed(self):
        self.completed = True

    @property
    def values(self):
        """Unwrapped .value of each recorded Result."""
        return [item.value for item in self.items]

    @property
    def last(self):
        return self.items[-1]


@pytest.fixture
def recorder():
    """Factory for fresh Recorder instances."""
    return Recorder


@pytest.fixture
def scheduler():
    """A virtual-time scheduler that only runs work when started."""
    return HistoricalScheduler()


@pytest.fixture
def dispatch_reducer():
    """Reducer adding numbers, concatenating strings and overwriting booleans."""
    return handle_actions(
        on("add", lambda s, a: add_to(a.full_value_path, a.payload)(s)),
        on("append", lambda s, a: add_to(a.full_value_path, a.payload)(s)),
        on("set", lambda s, a: s.updating_value(a.full_value_path, a.payload)),
    )


@pytest.fixture
def scenario_actions():
    """The dispatch actions of the reference scenario, in order."""
    return (
        [DispatchAction("add", NUMBER_PATH, v) for v in NUMBERS]
        + [DispatchAction("append", STRING_PATH, v) for v in STRINGS]
        + [DispatchAction("set", BOOLEAN_PATH, v) for v in BOOLEANS]
    )


@pytest.fixture
def adder():
    """The add_to reducer step factory."""
    return add_to
