"""Builds a store with the saga middleware and binds it to a wire context."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from saga_wire.context import WireContext
from saga_wire.interceptor import EffectInterceptor
from saga_wire.middleware import SagaMiddleware
from saga_wire.mocks import MockPair, MockRegistry
from saga_wire.store import Reducer, Store, combine_reducers, create_store, freeze

logger = logging.getLogger(__name__)

ReducerSpec = Reducer | Mapping[str, Reducer]


def identity_reducer(state: Any = None, action: Any = None) -> Any:
    return state


def resolve_reducer(reducer: ReducerSpec) -> Reducer:
    if callable(reducer):
        return reducer
    if isinstance(reducer, Mapping):
        return combine_reducers(reducer)
    raise TypeError(f"reducer must be callable or a mapping of reducers, got {type(reducer).__name__}")


def bind_store(
    reducer: ReducerSpec = identity_reducer,
    sagas: Iterable[Callable[..., Any]] = (),
    initial_store: Mapping[str, Any] | None = None,
    mocks: Iterable[MockPair] | None = None,
    *,
    strict: bool = False,
) -> tuple[WireContext, SagaMiddleware]:
    """Create a store, install it with its mocks, then start every saga.

    The context is installed before the first saga starts, so effects issued
    while sagas boot already see the store and the mock table.
    """
    context = WireContext(registry=MockRegistry(strict=strict))
    middleware = SagaMiddleware(EffectInterceptor(context))
    store = create_store(resolve_reducer(reducer), freeze(initial_store or {}), middleware)
    context.install(store, mocks or ())
    logger.debug("Bound store with %d mocks", len(context.registry))
    for saga in sagas:
        middleware.run(saga)
    return context, middleware


def create_mocked_store(
    reducer: ReducerSpec = identity_reducer,
    sagas: Iterable[Callable[..., Any]] = (),
    initial_store: Mapping[str, Any] | None = None,
    mocks: Iterable[MockPair] | None = None,
    *,
    strict: bool = False,
) -> Store:
    context, _ = bind_store(reducer, sagas, initial_store, mocks, strict=strict)
    return context.require_store("create a mocked store")


__all__ = [
    "ReducerSpec",
    "bind_store",
    "create_mocked_store",
    "identity_reducer",
    "resolve_reducer",
]
