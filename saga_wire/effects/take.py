"""Take and select effects."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union

from ._validators import ensure_optional_callable, ensure_pattern
from .base import EffectBase

Pattern = Union[str, type, Callable[[Any], bool], list, tuple]


@dataclass(frozen=True)
class TakeEffect(EffectBase):
    """Suspend until an action matching ``pattern`` is dispatched."""

    pattern: Pattern = "*"

    def __post_init__(self) -> None:
        ensure_pattern(self.pattern, name="pattern")


@dataclass(frozen=True)
class SelectEffect(EffectBase):
    """Read the current state, optionally through ``selector(state, *args)``."""

    selector: Callable[..., Any] | None = None
    args: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        ensure_optional_callable(self.selector, name="selector")


def take(pattern: Pattern = "*") -> TakeEffect:
    return TakeEffect(pattern=pattern)


def select(selector: Callable[..., Any] | None = None, *args: Any) -> SelectEffect:
    return SelectEffect(selector=selector, args=tuple(args))


__all__ = ["Pattern", "SelectEffect", "TakeEffect", "select", "take"]
