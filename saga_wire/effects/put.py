"""Put effect: dispatch an action into the bound store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .base import EffectBase


@dataclass(frozen=True)
class PutEffect(EffectBase):
    action: Any

    def __post_init__(self) -> None:
        if self.action is None:
            raise TypeError("put requires an action, got None")


def put(action: Any) -> PutEffect:
    return PutEffect(action=action)


__all__ = ["PutEffect", "put"]
