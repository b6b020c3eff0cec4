"""Routes call, put and watched-handler effects through the mock registry."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

from saga_wire.context import WireContext
from saga_wire.effects.call import CallTarget
from saga_wire.effects.watch import TakeEveryEffect, TakeLatestEffect
from saga_wire.errors import UnmockedCallError
from saga_wire.mocks import Substituted, invoke_target

logger = logging.getLogger(__name__)

InterceptKind = Literal["call", "put", "take_latest", "take_every", "handler"]


@dataclass(frozen=True)
class InterceptedEffect:
    """One effect seen by the interceptor, in processing order."""

    kind: InterceptKind
    target: Any
    args: tuple[Any, ...] = ()
    substituted: bool = False


class EffectInterceptor:
    """Single resolution path for call targets and watched handlers.

    The saga middleware hands every ``call`` and ``put`` to this object and
    asks it to wrap the handler of every ``take_latest``/``take_every``.
    Other effects never reach it.
    """

    def __init__(self, context: WireContext | None = None) -> None:
        self.context = context if context is not None else WireContext()
        self.history: list[InterceptedEffect] = []

    def call(self, target: CallTarget, *args: Any) -> Any:
        return self._invoke("call", target, args, strict=self.context.registry.strict)

    def put(self, action: Any) -> Any:
        store = self.context.require_store("dispatch an action")
        self.history.append(InterceptedEffect("put", action))
        return store.dispatch(action)

    def watch(self, effect: TakeLatestEffect | TakeEveryEffect) -> Callable[..., Any]:
        kind: InterceptKind = "take_latest" if isinstance(effect, TakeLatestEffect) else "take_every"
        self.history.append(InterceptedEffect(kind, effect.pattern, (effect.handler, *effect.args)))
        return self.wrap_handler(effect.handler)

    def wrap_handler(self, handler: Callable[..., Any]) -> Callable[..., Any]:
        """Return a callable that resolves ``handler`` on every invocation.

        Resolution happens per invocation, not at registration, so a
        substitute is forked and cancelled exactly like the real handler.
        """

        @functools.wraps(handler)
        def routed(*args: Any) -> Any:
            return self._invoke("handler", handler, args, strict=False)

        return routed

    def calls_to(self, target: CallTarget) -> list[tuple[Any, ...]]:
        """Arguments of every recorded call or handler invocation of ``target``."""
        return [
            record.args
            for record in self.history
            if record.kind in ("call", "handler") and record.target is target
        ]

    def put_actions(self) -> list[Any]:
        return [record.target for record in self.history if record.kind == "put"]

    def _invoke(
        self,
        kind: InterceptKind,
        target: CallTarget,
        args: tuple[Any, ...],
        *,
        strict: bool,
    ) -> Any:
        resolution = self.context.registry.resolve(target)
        if isinstance(resolution, Substituted):
            logger.debug("Substituting %s target %r", kind, target)
            self.history.append(InterceptedEffect(kind, target, args, substituted=True))
            return resolution.substitute(*args)
        if strict:
            raise UnmockedCallError(target)
        self.history.append(InterceptedEffect(kind, target, args))
        return invoke_target(target, args)


__all__ = ["EffectInterceptor", "InterceptKind", "InterceptedEffect"]
