"""Action channel: delivers dispatched actions to sagas suspended on ``take``."""

from __future__ import annotations

import inspect
from collections.abc import Callable

from saga_wire.effects.take import Pattern
from saga_wire.scheduler import Scheduler
from saga_wire.store import Action, action_type

Matcher = Callable[[Action], bool]


def matcher(pattern: Pattern) -> Matcher:
    """Compile a take pattern into a predicate over actions."""
    if pattern == "*":
        return lambda action: True
    if isinstance(pattern, str):
        return lambda action: action_type(action) == pattern
    if inspect.isclass(pattern):
        return lambda action: isinstance(action, pattern)
    if isinstance(pattern, (list, tuple)):
        matchers = [matcher(item) for item in pattern]
        return lambda action: any(match(action) for match in matchers)
    if callable(pattern):
        return lambda action: bool(pattern(action))
    raise TypeError(f"Unsupported take pattern: {pattern!r}")


class _Taker:
    __slots__ = ("callback", "match")

    def __init__(self, callback: Callable[[Action], None], match: Matcher) -> None:
        self.callback = callback
        self.match = match


class Channel:
    """Multicast channel; each taker receives at most one action."""

    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler
        self._takers: list[_Taker] = []

    def __len__(self) -> int:
        return len(self._takers)

    def take(self, callback: Callable[[Action], None], pattern: Pattern = "*") -> Callable[[], None]:
        """Register ``callback`` for the next matching action; returns a canceller."""
        taker = _Taker(callback, matcher(pattern))
        self._takers.append(taker)

        def cancel() -> None:
            if taker in self._takers:
                self._takers.remove(taker)

        return cancel

    def put(self, action: Action) -> None:
        self._scheduler.asap(lambda: self._deliver(action))

    def _deliver(self, action: Action) -> None:
        for taker in list(self._takers):
            if taker not in self._takers or not taker.match(action):
                continue
            self._takers.remove(taker)
            taker.callback(action)


__all__ = ["Channel", "Matcher", "matcher"]
