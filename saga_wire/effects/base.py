"""Base class for effect descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class EffectBase:
    """Plain instruction yielded by a saga and interpreted by the runtime.

    Descriptors are pure data: building one has no side effect. Nothing
    happens until a :class:`~saga_wire.middleware.SagaMiddleware` steps the
    saga that yielded it.
    """


def is_effect(value: Any) -> bool:
    return isinstance(value, EffectBase)


__all__ = ["EffectBase", "is_effect"]
