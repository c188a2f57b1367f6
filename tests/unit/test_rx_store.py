"""Unit tests for the reducer-stream engine."""

import pytest
from reactivex.subject import BehaviorSubject, Subject

from rxstate import Action, RxStore, State, StateInfo, create, create_reducer
from rxstate.config import DEFAULT_ACTION_NAME


@pytest.mark.unit
@pytest.mark.rx
def test_create_reducer_emits_transition_functions(recorder):
    """create_reducer maps each value to a StateInfo -> StateInfo function."""
    # Arrange
    values = Subject()
    received = recorder()
    create_reducer(values, lambda s, a: s.updating_value("v", a.value)).subscribe(
        received
    )

    # Act
    values.on_next(7)
    info = received.last(StateInfo(State.empty()))

    # Assert
    assert info.state.value_at_node("v").value == 7
    assert info.last_action == Action(DEFAULT_ACTION_NAME, 7)


@pytest.mark.unit
@pytest.mark.rx
def test_store_starts_with_initial_state_info(recorder):
    """Subscribers observe the seed StateInfo before any action."""
    # Arrange
    initial = State.empty().updating_value("ready", True)
    store = RxStore(create_reducer(Subject(), lambda s, a: s), initial_state=initial)
    received = recorder()

    # Act
    store.state_info_stream.subscribe(received)

    # Assert
    assert received.items == [StateInfo(initial)]
    assert store.last_state_info.last_action is None


@pytest.mark.unit
@pytest.mark.rx
def test_store_defaults_to_empty_state():
    """Without an initial state the store starts empty."""
    # Arrange & Act
    store = RxStore()

    # Assert
    assert store.last_state == State.empty()


@pytest.mark.unit
@pytest.mark.rx
def test_store_folds_actions_in_emission_order(adder):
    """The final state is the left fold of the reducer over the emissions."""
    # Arrange
    numbers = Subject()
    store = RxStore(create_reducer(numbers, lambda s, a: adder("a.b.c.d", a.value)(s)))

    # Act
    for n in [1, 2, 3, 4, 5]:
        numbers.on_next(n)

    # Assert
    assert store.last_state.number_at_node("a.b.c.d").value == 15


@pytest.mark.unit
@pytest.mark.rx
def test_state_info_records_triggering_action():
    """Each StateInfo carries the Action that produced it."""
    # Arrange
    names = Subject()
    store = RxStore(
        create_reducer(names, lambda s, a: s.updating_value("name", a.value))
    )

    # Act
    names.on_next(Action("rename", "Ada"))

    # Assert
    assert store.last_state_info.last_action == Action("rename", "Ada")


@pytest.mark.unit
@pytest.mark.rx
def test_fold_runs_once_per_action_regardless_of_subscribers(recorder):
    """Late subscribers replay the latest state without re-running the fold."""
    calls = []

    def counting(state, action):
        calls.append(action.value)
        return state.updating_value("last", action.value)

    # Arrange
    values = Subject()
    store = RxStore(create_reducer(values, counting))
    early = [recorder() for _ in range(3)]
    for r in early:
        store.state_stream.subscribe(r)

    # Act
    values.on_next("x")
    values.on_next("y")
    late = recorder()
    store.state_stream.subscribe(late)

    # Assert
    assert calls == ["x", "y"]
    assert len(late.items) == 1
    assert late.last.value_at_node("last").value == "y"
    assert all(len(r.items) == 3 for r in early)


@pytest.mark.unit
@pytest.mark.rx
def test_replaying_sources_deliver_in_registration_order():
    """Current values of BehaviorSubjects are folded in registration order."""
    # Arrange
    first = BehaviorSubject("first")
    second = BehaviorSubject("second")

    def append(state, action):
        return state.updating_value(
            "log", state.value_at_node("log").get_or_else(()) + (action.value,)
        )

    # Act
    store = RxStore(create_reducer(first, append), create_reducer(second, append))

    # Assert
    assert store.last_state.value_at_node("log").value == ("first", "second")


@pytest.mark.unit
@pytest.mark.rx
def test_pipeline_survives_single_producer_completion():
    """One producer completing does not stop the others."""
    # Arrange
    finished = Subject()
    live = Subject()
    store = RxStore(
        create_reducer(finished, lambda s, a: s.updating_value("f", a.value)),
        create_reducer(live, lambda s, a: s.updating_value("l", a.value)),
    )

    # Act
    finished.on_next(1)
    finished.on_completed()
    live.on_next(2)

    # Assert
    assert store.last_state.flatten() == {"f": 1, "l": 2}


@pytest.mark.unit
@pytest.mark.rx
def test_pipeline_survives_single_producer_failure(recorder):
    """One producer failing detaches only that producer."""
    # Arrange
    failing = Subject()
    live = Subject()
    store = RxStore(
        create_reducer(failing, lambda s, a: s.updating_value("f", a.value)),
        create_reducer(live, lambda s, a: s.updating_value("l", a.value)),
    )
    received = recorder()
    store.state_stream.subscribe(received)

    # Act
    failing.on_next(1)
    failing.on_error(ValueError("producer failed"))
    failing.on_next(99)
    live.on_next(2)

    # Assert
    assert store.last_state.flatten() == {"f": 1, "l": 2}
    assert received.errors == []
    assert not received.completed


@pytest.mark.unit
@pytest.mark.rx
def test_dispose_stops_updates_and_is_idempotent(recorder):
    """After dispose no further states are produced; disposing twice is safe."""
    # Arrange
    values = Subject()
    store = RxStore(create_reducer(values, lambda s, a: s.updating_value("v", a.value)))
    received = recorder()
    store.state_stream.subscribe(received)

    # Act
    values.on_next(1)
    store.dispose()
    store.dispose()
    values.on_next(2)

    # Assert
    assert store.is_disposed
    assert [s.value_at_node("v").value for s in received.items] == [None, 1]
    assert store.last_state.value_at_node("v").value == 1


@pytest.mark.unit
@pytest.mark.rx
def test_store_as_context_manager_disposes_on_exit():
    """Leaving the with-block disposes the store."""
    # Arrange & Act
    with RxStore() as store:
        assert not store.is_disposed

    # Assert
    assert store.is_disposed


@pytest.mark.unit
@pytest.mark.rx
def test_create_shares_one_fold_between_subscribers(recorder):
    """create() multicasts: concurrent subscribers share one fold."""
    calls = []
    values = Subject()

    def counting(state, action):
        calls.append(action.value)
        return state.updating_value("v", action.value)

    # Arrange
    stream = create(None, create_reducer(values, counting))
    first = recorder()
    second = recorder()
    stream.subscribe(first)
    stream.subscribe(second)

    # Act
    values.on_next("x")

    # Assert
    assert calls == ["x"]
    assert first.last.state == second.last.state
    assert second.items[0] == StateInfo(State.empty())


@pytest.mark.unit
@pytest.mark.rx
def test_scheduler_defers_state_delivery(scheduler):
    """With a scheduler, states are delivered only when it runs."""
    # Arrange
    values = Subject()
    store = RxStore(
        create_reducer(values, lambda s, a: s.updating_value("v", a.value)),
        scheduler=scheduler,
    )
    assert store.last_state is None
    scheduler.start()

    # Act
    values.on_next(1)
    pending = store.last_state.value_at_node("v")
    scheduler.start()

    # Assert
    assert pending.is_failure
    assert store.last_state.value_at_node("v").value == 1
