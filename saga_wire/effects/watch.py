"""Watcher effects: run a handler for every matching action."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ._validators import ensure_callable, ensure_pattern
from .base import EffectBase
from .take import Pattern


@dataclass(frozen=True)
class _WatchEffect(EffectBase):
    pattern: Pattern
    handler: Callable[..., Any]
    args: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        ensure_pattern(self.pattern, name="pattern")
        ensure_callable(self.handler, name="handler")


@dataclass(frozen=True)
class TakeLatestEffect(_WatchEffect):
    """Invoke ``handler(*args, action)`` per match, cancelling the previous invocation."""


@dataclass(frozen=True)
class TakeEveryEffect(_WatchEffect):
    """Invoke ``handler(*args, action)`` per match, concurrently with earlier ones."""


def take_latest(pattern: Pattern, handler: Callable[..., Any], *args: Any) -> TakeLatestEffect:
    return TakeLatestEffect(pattern=pattern, handler=handler, args=tuple(args))


def take_every(pattern: Pattern, handler: Callable[..., Any], *args: Any) -> TakeEveryEffect:
    return TakeEveryEffect(pattern=pattern, handler=handler, args=tuple(args))


__all__ = ["TakeEveryEffect", "TakeLatestEffect", "take_every", "take_latest"]
