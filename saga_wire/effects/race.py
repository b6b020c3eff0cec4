"""Race effect: resume with whichever of several effects settles first."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ._validators import ensure_effect_mapping
from .base import EffectBase


@dataclass(frozen=True)
class RaceEffect(EffectBase):
    """Run every effect at once; the first to resolve wins and the rest are cancelled.

    The saga is resumed with a dict holding the winner's value under its key
    and ``None`` for every loser.
    """

    effects: Mapping[str, EffectBase]

    def __post_init__(self) -> None:
        ensure_effect_mapping(self.effects, name="effects")
        object.__setattr__(self, "effects", dict(self.effects))


def race(effects: Mapping[str, EffectBase] | None = None, **named: EffectBase) -> RaceEffect:
    merged: dict[str, Any] = dict(effects or {})
    merged.update(named)
    return RaceEffect(effects=merged)


__all__ = ["RaceEffect", "race"]
