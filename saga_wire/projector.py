"""Derives view props from the current store state."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from saga_wire.context import WireContext
from saga_wire.store import State, Store

MapStateToProps = Callable[[State, Mapping[str, Any]], Any]


def project(
    store: Store,
    map_state_to_props: MapStateToProps | None,
    own_props: Mapping[str, Any],
) -> Any:
    if map_state_to_props is None:
        return None
    return map_state_to_props(store.get_state(), own_props)


def props_getter(
    context: WireContext,
    map_state_to_props: MapStateToProps | None,
    own_props: Mapping[str, Any],
) -> Callable[[], Any]:
    """Zero-argument accessor reading the store at call time."""
    if map_state_to_props is None:
        return lambda: None

    def props() -> Any:
        return project(context.require_store("get props"), map_state_to_props, own_props)

    return props


__all__ = ["MapStateToProps", "project", "props_getter"]
