"""``wire``: one-call harness for testing a connected component's state logic."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from saga_wire.binder import ReducerSpec, bind_store, identity_reducer
from saga_wire.config import WireSettings
from saga_wire.context import WireContext
from saga_wire.interceptor import EffectInterceptor, InterceptedEffect
from saga_wire.middleware import SagaMiddleware
from saga_wire.mocks import MockPair
from saga_wire.projector import MapStateToProps, props_getter
from saga_wire.settle import BoundActions, bind_action_creators, settle_after
from saga_wire.store import Store

logger = logger.bind(component="saga_wire.harness")

MapDispatchToProps = Callable[[Callable[[Any], Any], Mapping[str, Any]], Mapping[str, Any]]

DEFAULT_OWN_PROPS: Mapping[str, Any] = {"location": {"search": ""}}


@dataclass(frozen=True)
class Component:
    """The two connect() functions of a component under test."""

    map_state_to_props: MapStateToProps | None = None
    map_dispatch_to_props: MapDispatchToProps | None = None

    @classmethod
    def coerce(cls, component: Component | Mapping[str, Any] | None) -> Component:
        if component is None:
            return cls()
        if isinstance(component, Component):
            return component
        if isinstance(component, Mapping):
            unknown = set(component) - {"map_state_to_props", "map_dispatch_to_props"}
            if unknown:
                raise TypeError(f"Unknown component keys: {sorted(unknown)}")
            return cls(**component)
        raise TypeError(f"component must be Component or mapping, got {type(component).__name__}")


@dataclass(frozen=True)
class Wired:
    """Handles returned by :func:`wire`.

    ``functions`` mirrors ``map_dispatch_to_props``; every action creator in
    it returns an ``asyncio.Task`` resolving to the props once the dispatch
    settled. ``dispatch`` does the same for a raw action. ``props`` reads the
    props synchronously.
    """

    functions: BoundActions
    dispatch: Callable[[Any], asyncio.Task[Any]]
    props: Callable[[], Any]
    context: WireContext = field(repr=False)
    middleware: SagaMiddleware = field(repr=False)
    settings: WireSettings = field(default_factory=WireSettings)

    @property
    def store(self) -> Store:
        return self.context.require_store("get the store")

    @property
    def interceptor(self) -> EffectInterceptor:
        return self.middleware.interceptor

    @property
    def history(self) -> list[InterceptedEffect]:
        return list(self.interceptor.history)

    def put_actions(self) -> list[Any]:
        return self.interceptor.put_actions()


def wire(
    *,
    reducer: ReducerSpec = identity_reducer,
    sagas: Iterable[Callable[..., Any]] = (),
    component: Component | Mapping[str, Any] | None = None,
    params: Any = None,
    own_props: Mapping[str, Any] | None = None,
    mocks: Iterable[MockPair] | None = None,
    initial_store: Mapping[str, Any] | None = None,
    settle_delay: float | None = None,
    strict_mocks: bool | None = None,
) -> Wired:
    """Build a store for one test, start ``sagas`` and connect ``component`` to it.

    Args:
        reducer: A reducer, or a mapping of state key to reducer combined
            with :func:`~saga_wire.store.combine_reducers`.
        sagas: Root sagas, started in order.
        component: :class:`Component` or a mapping with the same keys.
        params: Passed to the component as ``own_props["params"]``; falls
            back to ``own_props["params"]``.
        own_props: Props the component receives from its parent.
        mocks: ``(target, substitute)`` pairs; see
            :func:`~saga_wire.mocks.structured_mocks`.
        initial_store: Plain nested mapping seeding the state.
        settle_delay: Seconds to wait before reading props after a dispatch.
            Defaults to ``SAGA_WIRE_SETTLE_DELAY`` or 0.01.
        strict_mocks: Fail on unmocked call targets instead of running them.
            Defaults to ``SAGA_WIRE_STRICT_MOCKS``.
    """
    settings = WireSettings.from_env().override(settle_delay=settle_delay, strict_mocks=strict_mocks)
    connected = Component.coerce(component)
    own_props = DEFAULT_OWN_PROPS if own_props is None else own_props

    context, middleware = bind_store(
        reducer, sagas, initial_store, mocks, strict=settings.strict_mocks
    )
    initial_props = {**own_props, "params": params or own_props.get("params")}
    props = props_getter(context, connected.map_state_to_props, initial_props)

    def raw_dispatch(action: Any) -> Any:
        return context.require_store("dispatch an action").dispatch(action)

    def settle(trigger: Callable[[], Any]) -> asyncio.Task[Any]:
        return settle_after(trigger, props, delay=settings.settle_delay, errors=middleware.errors)

    def dispatch(action: Any) -> asyncio.Task[Any]:
        return settle(lambda: raw_dispatch(action))

    if connected.map_dispatch_to_props is not None:
        functions = bind_action_creators(
            connected.map_dispatch_to_props(raw_dispatch, initial_props), settle
        )
    else:
        functions = BoundActions({})

    logger.debug(
        "Wired component with {} sagas and {} mocks (settle_delay={}s, strict={})",
        len(middleware.tasks),
        len(context.registry),
        settings.settle_delay,
        settings.strict_mocks,
    )
    return Wired(
        functions=functions,
        dispatch=dispatch,
        props=props,
        context=context,
        middleware=middleware,
        settings=settings,
    )


__all__ = ["Component", "DEFAULT_OWN_PROPS", "Wired", "wire"]
