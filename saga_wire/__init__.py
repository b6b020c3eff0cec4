"""
saga-wire: test harness for reducer + saga + selector state logic.

Build an isolated store, run sagas against it with selected calls or
watched handlers replaced by mocks, and await the props a component would
see once a dispatch has settled.
"""

from saga_wire.binder import bind_store, create_mocked_store
from saga_wire.config import WireSettings
from saga_wire.context import WireContext
from saga_wire.effects import (
    apply,
    call,
    cancel,
    fork,
    join,
    put,
    race,
    select,
    spawn,
    take,
    take_every,
    take_latest,
)
from saga_wire.errors import (
    ContextNotBoundError,
    MiddlewareNotMountedError,
    ReducerError,
    SagaWireError,
    TaskCancelledError,
    UnmockedCallError,
)
from saga_wire.harness import DEFAULT_OWN_PROPS, Component, Wired, wire
from saga_wire.interceptor import EffectInterceptor, InterceptedEffect
from saga_wire.middleware import SagaMiddleware, create_saga_middleware
from saga_wire.mocks import UNMAPPED, MockRegistry, Substituted, Unmapped, structured_mocks
from saga_wire.projector import project, props_getter
from saga_wire.settle import BoundActions, bind_action_creators, settle_after
from saga_wire.store import Store, combine_reducers, create_store, freeze, get_in
from saga_wire.task import SagaTask, TaskStatus

__all__ = [
    "BoundActions",
    "Component",
    "ContextNotBoundError",
    "DEFAULT_OWN_PROPS",
    "EffectInterceptor",
    "InterceptedEffect",
    "MiddlewareNotMountedError",
    "MockRegistry",
    "ReducerError",
    "SagaMiddleware",
    "SagaTask",
    "SagaWireError",
    "Store",
    "Substituted",
    "TaskCancelledError",
    "TaskStatus",
    "UNMAPPED",
    "Unmapped",
    "UnmockedCallError",
    "WireContext",
    "WireSettings",
    "Wired",
    "apply",
    "bind_action_creators",
    "bind_store",
    "call",
    "cancel",
    "combine_reducers",
    "create_mocked_store",
    "create_saga_middleware",
    "create_store",
    "fork",
    "freeze",
    "get_in",
    "join",
    "project",
    "props_getter",
    "put",
    "race",
    "select",
    "settle_after",
    "spawn",
    "structured_mocks",
    "take",
    "take_every",
    "take_latest",
    "wire",
]
