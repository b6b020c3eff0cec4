from __future__ import annotations

import pytest
from frozendict import frozendict

from saga_wire import ReducerError, combine_reducers, create_store, freeze, get_in
from saga_wire.store import INIT


def counter(state=None, action=None):
    if state is None:
        state = 0
    if action["type"] == "INC":
        return state + 1
    return state


class TestFreeze:
    def test_nested_structures_become_immutable(self) -> None:
        frozen = freeze({"a": {"b": [1, {"c": 2}]}, "s": {1, 2}})

        assert isinstance(frozen, frozendict)
        assert isinstance(frozen["a"], frozendict)
        assert frozen["a"]["b"] == (1, frozendict({"c": 2}))
        assert frozen["s"] == frozenset({1, 2})

    def test_get_in(self) -> None:
        state = freeze({"a": {"b": [10, 20]}})

        assert get_in(state, ("a", "b", 1)) == 20
        assert get_in(state, ("a", "missing"), "default") == "default"
        assert get_in(state, ("a", "b", 5)) is None


class TestCombineReducers:
    def test_each_reducer_owns_its_slice(self) -> None:
        reducer = combine_reducers({"clicks": counter, "views": counter})

        state = reducer(None, {"type": INIT})
        state = reducer(state, {"type": "INC"})

        assert state == {"clicks": 1, "views": 1}

    def test_unknown_keys_are_preserved(self) -> None:
        reducer = combine_reducers({"clicks": counter})

        state = reducer(freeze({"other": {"x": 1}}), {"type": "INC"})

        assert state == {"other": {"x": 1}, "clicks": 1}

    def test_unchanged_state_keeps_identity(self) -> None:
        reducer = combine_reducers({"clicks": counter})
        state = reducer(None, {"type": INIT})

        assert reducer(state, {"type": "NOOP"}) is state

    def test_reducer_returning_none_fails(self) -> None:
        reducer = combine_reducers({"broken": lambda state, action: None})

        with pytest.raises(ReducerError, match="'broken' returned None"):
            reducer(None, {"type": INIT})


class TestStore:
    def test_init_action_seeds_state(self) -> None:
        store = create_store(combine_reducers({"clicks": counter}), freeze({}))

        assert store.get_state() == {"clicks": 0}

    def test_dispatch_and_subscribe(self) -> None:
        store = create_store(counter)
        calls = []
        unsubscribe = store.subscribe(lambda: calls.append(store.get_state()))

        store.dispatch({"type": "INC"})
        unsubscribe()
        store.dispatch({"type": "INC"})

        assert calls == [1]
        assert store.get_state() == 2

    def test_middleware_order(self) -> None:
        seen = []

        def tagging(tag):
            def middleware(store):
                def wrap(next_dispatch):
                    def dispatch(action):
                        seen.append(tag)
                        return next_dispatch(action)

                    return dispatch

                return wrap

            return middleware

        store = create_store(counter, None, tagging("outer"), tagging("inner"))
        store.dispatch({"type": "INC"})

        assert seen == ["outer", "inner"]

    def test_action_without_type_is_rejected(self) -> None:
        store = create_store(counter)

        with pytest.raises(TypeError, match="Actions must carry a type"):
            store.dispatch({"payload": 1})

    def test_reducer_may_not_dispatch(self) -> None:
        holder = {}

        def rogue(state=None, action=None):
            if action["type"] == "GO":
                holder["store"].dispatch({"type": "AGAIN"})
            return state

        store = create_store(rogue)
        holder["store"] = store

        with pytest.raises(ReducerError, match="may not dispatch"):
            store.dispatch({"type": "GO"})
