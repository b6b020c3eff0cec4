"""Harness settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

SETTLE_DELAY_ENV_KEY = "SAGA_WIRE_SETTLE_DELAY"
STRICT_MOCKS_ENV_KEY = "SAGA_WIRE_STRICT_MOCKS"

# Long enough for the event loop to drain one pass of pending mocked awaitables.
DEFAULT_SETTLE_DELAY = 0.01

_TRUTHY = ("1", "true", "yes")


@dataclass(frozen=True)
class WireSettings:
    settle_delay: float = DEFAULT_SETTLE_DELAY
    strict_mocks: bool = False

    def __post_init__(self) -> None:
        if self.settle_delay < 0:
            raise ValueError(f"settle_delay must be non-negative, got {self.settle_delay!r}")

    @classmethod
    def from_env(cls) -> WireSettings:
        raw_delay = os.environ.get(SETTLE_DELAY_ENV_KEY, "").strip()
        try:
            delay = float(raw_delay) if raw_delay else DEFAULT_SETTLE_DELAY
        except ValueError as exc:
            raise ValueError(f"{SETTLE_DELAY_ENV_KEY} must be a number of seconds, got {raw_delay!r}") from exc
        strict = os.environ.get(STRICT_MOCKS_ENV_KEY, "").lower() in _TRUTHY
        return cls(settle_delay=delay, strict_mocks=strict)

    def override(self, *, settle_delay: float | None = None, strict_mocks: bool | None = None) -> WireSettings:
        return WireSettings(
            settle_delay=self.settle_delay if settle_delay is None else settle_delay,
            strict_mocks=self.strict_mocks if strict_mocks is None else strict_mocks,
        )


__all__ = [
    "DEFAULT_SETTLE_DELAY",
    "SETTLE_DELAY_ENV_KEY",
    "STRICT_MOCKS_ENV_KEY",
    "WireSettings",
]
