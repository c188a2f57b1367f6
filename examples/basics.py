import logging

from reactivex.subject import BehaviorSubject, Subject

from rxstate import (
    Action,
    DispatchAction,
    Result,
    RxStore,
    create_default,
    create_reducer,
    handle_actions,
    on,
)

LOG_LEVEL = logging.INFO

logging.basicConfig(level=LOG_LEVEL)


def add(amount):
    return lambda current: current.map(lambda v: v + amount).or_else(
        Result.success(amount)
    )


# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Composing producer streams with RxStore")
print("-" * 100)
print()

# Each producer is an ordinary subject. Values can be raw or tagged Actions.
clicks = Subject()
user_name = BehaviorSubject(Action("rename", "Alice"))

store = RxStore(
    create_reducer(clicks, lambda s, a: s.mapping_value("stats.clicks", add(1))),
    create_reducer(user_name, lambda s, a: s.updating_value("user.name", a.value)),
)

# Typed node streams only fire when their own path changes.
store.number_at_node("stats.clicks").subscribe(
    lambda r: print(f"Clicks: {r.get_or_else(0)}")
)
store.string_at_node("user.name").subscribe(lambda r: print(f"Name: {r.value}"))

clicks.on_next("click")
clicks.on_next("click")
user_name.on_next(Action("rename", "Bob"))

# The latest state info records what caused it.
print(f"Last action: {store.last_state_info.last_action}")

store.dispose()
clicks.on_next("click")  # No longer folded

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Centralising actions with DispatchStore")
print("-" * 100)
print()

reducer = handle_actions(
    on("deposit", lambda s, a: s.mapping_value(a.full_value_path, add(a.payload))),
    on("withdraw", lambda s, a: s.mapping_value(a.full_value_path, add(-a.payload))),
)

with create_default(reducer) as bank:
    bank.number_at_node("accounts.alice").subscribe(
        lambda r: print(f"Alice: {r.get_or_else(0)}")
    )

    bank.dispatch(DispatchAction("deposit", "accounts.alice", 100))
    bank.dispatch(DispatchAction("withdraw", "accounts.alice", 30))
    bank.dispatch(DispatchAction("audit", "accounts.alice", None))  # Ignored

    print(f"Flattened state: {bank.last_state.flatten()}")
