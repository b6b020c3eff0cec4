"""Task management effects: fork, spawn, cancel and join."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ._validators import ensure_callable
from .base import EffectBase

if TYPE_CHECKING:  # pragma: no cover - type-only import to avoid a runtime cycle
    from saga_wire.task import SagaTask


@dataclass(frozen=True)
class ForkEffect(EffectBase):
    """Start ``target(*args)`` as a child attached to the current task."""

    target: Callable[..., Any]
    args: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        ensure_callable(self.target, name="target")


@dataclass(frozen=True)
class SpawnEffect(EffectBase):
    """Start ``target(*args)`` as a detached task."""

    target: Callable[..., Any]
    args: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        ensure_callable(self.target, name="target")


@dataclass(frozen=True)
class CancelEffect(EffectBase):
    """Cancel ``task``; ``None`` cancels the task that yielded the effect."""

    task: SagaTask | None = None


@dataclass(frozen=True)
class JoinEffect(EffectBase):
    task: SagaTask


def fork(target: Callable[..., Any], *args: Any) -> ForkEffect:
    return ForkEffect(target=target, args=tuple(args))


def spawn(target: Callable[..., Any], *args: Any) -> SpawnEffect:
    return SpawnEffect(target=target, args=tuple(args))


def cancel(task: SagaTask | None = None) -> CancelEffect:
    return CancelEffect(task=task)


def join(task: SagaTask) -> JoinEffect:
    return JoinEffect(task=task)


__all__ = [
    "CancelEffect",
    "ForkEffect",
    "JoinEffect",
    "SpawnEffect",
    "cancel",
    "fork",
    "join",
    "spawn",
]
