"""Minimal immutable-state store with middleware support."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Set
from typing import Any

from frozendict import frozendict

from saga_wire.errors import ReducerError

logger = logging.getLogger(__name__)

Action = Any
State = Any
Reducer = Callable[[State, Action], State]
Dispatch = Callable[[Action], Any]
Middleware = Callable[["Store"], Callable[[Dispatch], Dispatch]]

INIT = "@@saga_wire/INIT"


def freeze(value: Any) -> Any:
    """Convert nested mappings and sequences into immutable equivalents."""
    if isinstance(value, Mapping):
        return frozendict({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    if isinstance(value, Set):
        return frozenset(freeze(item) for item in value)
    return value


def get_in(state: Any, path: Iterable[Any], default: Any = None) -> Any:
    current = state
    for key in path:
        if isinstance(current, Mapping):
            if key not in current:
                return default
            current = current[key]
        elif isinstance(current, tuple) and isinstance(key, int):
            if not -len(current) <= key < len(current):
                return default
            current = current[key]
        else:
            return default
    return current


def action_type(action: Action) -> Any:
    if isinstance(action, Mapping):
        return action.get("type")
    return getattr(action, "type", None)


def combine_reducers(reducers: Mapping[str, Reducer]) -> Reducer:
    """Merge named sub-reducers into one reducer over a keyed ``frozendict`` tree.

    Each sub-reducer sees only its own slice (``None`` when the slice does not
    exist yet). Keys without a reducer are kept untouched.
    """
    if not isinstance(reducers, Mapping) or not reducers:
        raise TypeError("combine_reducers expects a non-empty mapping of reducers")
    for key, reducer in reducers.items():
        if not callable(reducer):
            raise TypeError(f"reducer for {key!r} must be callable, got {type(reducer).__name__}")
    reducers = dict(reducers)

    def combined(state: State = None, action: Action = None) -> State:
        if state is None:
            state = frozendict()
        updated = dict(state)
        changed = False
        for key, reducer in reducers.items():
            previous = state.get(key)
            next_slice = reducer(previous, action)
            if next_slice is None:
                raise ReducerError(
                    f"Reducer {key!r} returned None for action {action_type(action)!r}; "
                    "return the previous state for unhandled actions"
                )
            updated[key] = next_slice
            changed = changed or next_slice is not previous
        return frozendict(updated) if changed else state

    return combined


class Store:
    """Holds the current state and routes dispatches through the reducer."""

    def __init__(self, reducer: Reducer, state: State = None) -> None:
        if not callable(reducer):
            raise TypeError(f"reducer must be callable, got {type(reducer).__name__}")
        self._reducer = reducer
        self._state = state
        self._listeners: list[Callable[[], None]] = []
        self._dispatching = False
        self._dispatch: Dispatch = self._base_dispatch

    def get_state(self) -> State:
        return self._state

    def dispatch(self, action: Action) -> Any:
        return self._dispatch(action)

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _base_dispatch(self, action: Action) -> Any:
        if action_type(action) is None:
            raise TypeError(f"Actions must carry a type, got {action!r}")
        if self._dispatching:
            raise ReducerError("Reducers may not dispatch actions")
        self._dispatching = True
        try:
            self._state = self._reducer(self._state, action)
        finally:
            self._dispatching = False
        for listener in list(self._listeners):
            listener()
        return action


def create_store(
    reducer: Reducer,
    initial_state: State = None,
    *middleware: Middleware,
) -> Store:
    """Build a store, run the reducer once with ``INIT``, then attach middleware.

    Middleware is ``middleware(store) -> (next_dispatch) -> dispatch``; the
    first middleware given is the outermost.
    """
    store = Store(reducer, initial_state)
    store._state = store._reducer(initial_state, {"type": INIT})
    dispatch = store._base_dispatch
    for item in reversed(middleware):
        dispatch = item(store)(dispatch)
    store._dispatch = dispatch
    logger.debug("Store created with %d middleware", len(middleware))
    return store


__all__ = [
    "Action",
    "Dispatch",
    "INIT",
    "Middleware",
    "Reducer",
    "State",
    "Store",
    "action_type",
    "combine_reducers",
    "create_store",
    "freeze",
    "get_in",
]
