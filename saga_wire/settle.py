"""Settle-aware triggers: run a dispatch, wait a scheduling tick, read props."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import Any, Union

from saga_wire.config import DEFAULT_SETTLE_DELAY

ActionCreatorTree = Mapping[str, Union[Callable[..., Any], "ActionCreatorTree"]]
Settle = Callable[[Callable[[], Any]], "asyncio.Task[Any]"]


async def _later(
    project: Callable[[], Any],
    delay: float,
    errors: Sequence[BaseException] | None,
    baseline: int,
) -> Any:
    await asyncio.sleep(delay)
    if errors is not None and len(errors) > baseline:
        raise errors[baseline]
    return project()


def settle_after(
    trigger: Callable[[], Any],
    project: Callable[[], Any],
    *,
    delay: float = DEFAULT_SETTLE_DELAY,
    errors: Sequence[BaseException] | None = None,
) -> asyncio.Task[Any]:
    """Run ``trigger`` now and return a task resolving to ``project()`` after ``delay``.

    The delay is a heuristic: it gives mocked awaitables one pass of the
    event loop to resolve, it does not prove that every saga is idle. It
    applies even when the trigger had nothing asynchronous to wait for.

    Exceptions raised by ``trigger`` propagate immediately. When ``errors``
    is the middleware's error list, a saga error recorded after the trigger
    rejects the task instead of resolving it.
    """
    loop = asyncio.get_running_loop()
    baseline = len(errors) if errors is not None else 0
    trigger()
    return loop.create_task(_later(project, delay, errors, baseline))


class BoundActions(Mapping[str, Any]):
    """Read-only tree of settle-aware action creators.

    Supports both ``functions["load"](...)`` and ``functions.load(...)``.
    """

    def __init__(self, entries: Mapping[str, Any]) -> None:
        self._entries = dict(entries)

    def __getitem__(self, key: str) -> Any:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._entries[name]
        except KeyError:
            raise AttributeError(f"No action creator named {name!r}") from None

    def __repr__(self) -> str:
        return f"BoundActions({list(self._entries)!r})"


def bind_action_creators(actions: ActionCreatorTree, settle: Settle) -> BoundActions:
    """Wrap every callable leaf so that calling it returns the settled-props task."""
    if not isinstance(actions, Mapping):
        raise TypeError(f"action creators must be a mapping, got {type(actions).__name__}")
    wrapped: dict[str, Any] = {}
    for name, value in actions.items():
        if callable(value):
            wrapped[name] = _settled(value, settle)
        elif isinstance(value, Mapping):
            wrapped[name] = bind_action_creators(value, settle)
        else:
            raise TypeError(
                f"action creator {name!r} must be callable or a nested mapping, "
                f"got {type(value).__name__}"
            )
    return BoundActions(wrapped)


def _settled(creator: Callable[..., Any], settle: Settle) -> Callable[..., asyncio.Task[Any]]:
    def invoke(*args: Any, **kwargs: Any) -> asyncio.Task[Any]:
        return settle(lambda: creator(*args, **kwargs))

    invoke.__name__ = getattr(creator, "__name__", "action_creator")
    invoke.__wrapped__ = creator
    return invoke


__all__ = [
    "ActionCreatorTree",
    "BoundActions",
    "bind_action_creators",
    "settle_after",
]
