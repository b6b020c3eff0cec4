"""Call effects: invoke a target and suspend until its result resolves."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union

from ._validators import ensure_call_target
from .base import EffectBase

CallTarget = Union[Callable[..., Any], tuple[Any, Union[str, Callable[..., Any]]]]


@dataclass(frozen=True)
class CallEffect(EffectBase):
    """Invoke ``target`` with ``args``.

    ``target`` is a callable or an ``(object, method)`` pair, where ``method``
    is either an attribute name or a function to bind to ``object``. The
    result may be a plain value, an awaitable, or a generator (run as a
    nested saga).
    """

    target: CallTarget
    args: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        ensure_call_target(self.target, name="target")


def call(target: CallTarget, *args: Any) -> CallEffect:
    return CallEffect(target=target, args=tuple(args))


def apply(obj: Any, method: str | Callable[..., Any], args: tuple[Any, ...] = ()) -> CallEffect:
    """Call ``method`` bound to ``obj``; shorthand for ``call((obj, method), *args)``."""
    return CallEffect(target=(obj, method), args=tuple(args))


__all__ = ["CallEffect", "CallTarget", "apply", "call"]
