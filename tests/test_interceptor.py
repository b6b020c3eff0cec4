from __future__ import annotations

from unittest.mock import Mock

import pytest

from saga_wire import (
    ContextNotBoundError,
    EffectInterceptor,
    MockRegistry,
    UnmockedCallError,
    WireContext,
    create_store,
    project,
    props_getter,
    take_every,
)


def real_fetch(url):
    return f"real {url}"


def handler(action):
    return f"handled {action['type']}"


class TestCall:
    def test_substitute_replaces_target(self) -> None:
        substitute = Mock(return_value="mocked")
        interceptor = EffectInterceptor(WireContext(registry=MockRegistry([(real_fetch, substitute)])))

        assert interceptor.call(real_fetch, "/a") == "mocked"
        substitute.assert_called_once_with("/a")

    def test_unmapped_target_runs_for_real(self) -> None:
        interceptor = EffectInterceptor()

        assert interceptor.call(real_fetch, "/a") == "real /a"
        assert interceptor.calls_to(real_fetch) == [("/a",)]

    def test_strict_registry_rejects_unmapped_target(self) -> None:
        interceptor = EffectInterceptor(WireContext(registry=MockRegistry(strict=True)))

        with pytest.raises(UnmockedCallError, match="real_fetch"):
            interceptor.call(real_fetch, "/a")


class TestHandlers:
    def test_wrapped_handler_resolves_per_invocation(self) -> None:
        context = WireContext()
        interceptor = EffectInterceptor(context)
        routed = interceptor.wrap_handler(handler)

        assert routed({"type": "A"}) == "handled A"

        substitute = Mock(return_value="substituted")
        context.registry.register(handler, substitute)

        assert routed({"type": "B"}) == "substituted"
        substitute.assert_called_once_with({"type": "B"})

    def test_handlers_fall_back_even_in_strict_mode(self) -> None:
        interceptor = EffectInterceptor(WireContext(registry=MockRegistry(strict=True)))

        assert interceptor.wrap_handler(handler)({"type": "A"}) == "handled A"

    def test_watch_records_registration(self) -> None:
        interceptor = EffectInterceptor()

        interceptor.watch(take_every("A", handler, 1))

        record = interceptor.history[-1]
        assert (record.kind, record.target, record.args) == ("take_every", "A", (handler, 1))


class TestContext:
    def test_put_without_store_names_operation(self) -> None:
        interceptor = EffectInterceptor()

        with pytest.raises(ContextNotBoundError, match="Trying to dispatch an action but the store is not available"):
            interceptor.put({"type": "A"})

    def test_props_without_store_names_operation(self) -> None:
        props = props_getter(WireContext(), lambda state, own_props: state, {})

        with pytest.raises(ContextNotBoundError, match="get props"):
            props()

    def test_put_dispatches_into_bound_store(self) -> None:
        store = create_store(lambda state=None, action=None: action["type"])
        context = WireContext()
        context.install(store, [(real_fetch, Mock())])
        interceptor = EffectInterceptor(context)

        interceptor.put({"type": "A"})

        assert store.get_state() == "A"
        assert interceptor.put_actions() == [{"type": "A"}]
        assert real_fetch in context.registry

    def test_contexts_are_isolated(self) -> None:
        first, second = WireContext(), WireContext()
        first.registry.register(real_fetch, Mock(return_value="first"))

        assert EffectInterceptor(first).call(real_fetch, "/") == "first"
        assert EffectInterceptor(second).call(real_fetch, "/") == "real /"


class TestProjector:
    def test_projection_reflects_current_state(self) -> None:
        store = create_store(lambda state=None, action=None: action["type"])
        context = WireContext()
        context.install(store)
        props = props_getter(context, lambda state, own_props: {"last": state, **own_props}, {"id": 1})

        assert props() == {"last": "@@saga_wire/INIT", "id": 1}
        store.dispatch({"type": "NEXT"})
        assert props() == {"last": "NEXT", "id": 1}

    def test_missing_projection_yields_none(self) -> None:
        store = create_store(lambda state=None, action=None: state)

        assert project(store, None, {}) is None
        assert props_getter(WireContext(), None, {})() is None
