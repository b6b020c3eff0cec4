"""Effect descriptors yielded by sagas."""

from .base import EffectBase, is_effect
from .call import CallEffect, CallTarget, apply, call
from .put import PutEffect, put
from .race import RaceEffect, race
from .spawn import (
    CancelEffect,
    ForkEffect,
    JoinEffect,
    SpawnEffect,
    cancel,
    fork,
    join,
    spawn,
)
from .take import Pattern, SelectEffect, TakeEffect, select, take
from .watch import TakeEveryEffect, TakeLatestEffect, take_every, take_latest

__all__ = [
    "CallEffect",
    "CallTarget",
    "CancelEffect",
    "EffectBase",
    "ForkEffect",
    "JoinEffect",
    "Pattern",
    "PutEffect",
    "RaceEffect",
    "SelectEffect",
    "SpawnEffect",
    "TakeEffect",
    "TakeEveryEffect",
    "TakeLatestEffect",
    "apply",
    "call",
    "cancel",
    "fork",
    "is_effect",
    "join",
    "put",
    "race",
    "select",
    "spawn",
    "take",
    "take_every",
    "take_latest",
]
