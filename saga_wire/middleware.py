"""Saga middleware: runs generator sagas against a store.

Effects are interpreted here. ``call``/``put`` and watched handlers are
delegated to an :class:`~saga_wire.interceptor.EffectInterceptor`, which is
where mocks take over; everything else (take, select, race, fork, spawn,
cancel, join) is handled directly and cannot be mocked.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
from collections.abc import Awaitable, Callable, Generator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from saga_wire.channel import Channel
from saga_wire.effects import (
    CallEffect,
    CancelEffect,
    EffectBase,
    ForkEffect,
    JoinEffect,
    PutEffect,
    RaceEffect,
    SelectEffect,
    SpawnEffect,
    TakeEffect,
    TakeEveryEffect,
    TakeLatestEffect,
)
from saga_wire.effects.take import Pattern
from saga_wire.errors import MiddlewareNotMountedError, TaskCancelledError
from saga_wire.interceptor import EffectInterceptor
from saga_wire.scheduler import Scheduler
from saga_wire.task import Canceller, Resume, SagaTask, TaskStatus

if TYPE_CHECKING:  # pragma: no cover - type-only import to avoid a runtime cycle
    from saga_wire.store import Dispatch, Store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _AwaitEffect(EffectBase):
    awaitable: Awaitable[Any]


def _await_value(value: Any) -> Generator[Any, Any, Any]:
    if inspect.isawaitable(value):
        value = yield _AwaitEffect(value)
    return value


def _reraise(error: Exception) -> Generator[Any, Any, Any]:
    raise error
    yield  # pragma: no cover


def _as_iterator(value: Any) -> Generator[Any, Any, Any]:
    if inspect.isgenerator(value):
        return value
    return _await_value(value)


def _settle_from(task: SagaTask, resume: Resume) -> None:
    if task.status is TaskStatus.COMPLETED:
        resume(task.result)
    elif task.status is TaskStatus.ABORTED:
        resume(error=task.error)
    else:
        resume(error=TaskCancelledError(f"Task {task.name} was cancelled"))


def _take_every(pattern: Pattern, worker: Callable[..., Any], args: tuple[Any, ...]):
    while True:
        action = yield TakeEffect(pattern)
        yield ForkEffect(worker, (*args, action))


def _take_latest(pattern: Pattern, worker: Callable[..., Any], args: tuple[Any, ...]):
    last: SagaTask | None = None
    while True:
        action = yield TakeEffect(pattern)
        if last is not None and last.is_running:
            yield CancelEffect(last)
        last = yield ForkEffect(worker, (*args, action))


class SagaMiddleware:
    """Store middleware that runs sagas and feeds them dispatched actions."""

    def __init__(self, interceptor: EffectInterceptor | None = None) -> None:
        self.interceptor = interceptor if interceptor is not None else EffectInterceptor()
        self.scheduler = Scheduler()
        self.channel = Channel(self.scheduler)
        self.tasks: list[SagaTask] = []
        self.errors: list[BaseException] = []
        self._store: Store | None = None

    def __call__(self, store: Store) -> Callable[[Dispatch], Dispatch]:
        self._store = store
        if not self.interceptor.context.is_bound:
            self.interceptor.context.install(store)

        def wrap(next_dispatch: Dispatch) -> Dispatch:
            def dispatch(action: Any) -> Any:
                result = next_dispatch(action)
                self.channel.put(action)
                return result

            return dispatch

        return wrap

    def run(self, saga: Callable[..., Any], *args: Any) -> SagaTask:
        """Start ``saga(*args)`` as a root task."""
        if self._store is None:
            raise MiddlewareNotMountedError()
        return self.scheduler.immediately(lambda: self._start(saga, args, detached=True))

    def _start(
        self,
        target: Callable[..., Any],
        args: tuple[Any, ...],
        *,
        parent: SagaTask | None = None,
        detached: bool = False,
    ) -> SagaTask:
        name = getattr(target, "__qualname__", None) or repr(target)
        try:
            iterator = _as_iterator(target(*args))
        except Exception as exc:
            iterator = _reraise(exc)
        task = SagaTask(iterator, self._run_effect, name=name, detached=detached)
        if detached:
            self.tasks.append(task)
            task.add_done_callback(self._report)
        elif parent is not None:
            parent.attach(task)
        task.start()
        return task

    def _report(self, task: SagaTask) -> None:
        if task.status is TaskStatus.ABORTED:
            self.errors.append(task.error)
            logger.error("Uncaught error in saga %s", task.name, exc_info=task.error)

    def _run_effect(self, task: SagaTask, effect: Any, resume: Resume) -> Canceller | None:
        if isinstance(effect, TakeEffect):
            return self.channel.take(resume, effect.pattern)
        if isinstance(effect, PutEffect):
            return self._run_put(effect, resume)
        if isinstance(effect, CallEffect):
            return self._run_call(task, effect, resume)
        if isinstance(effect, SelectEffect):
            state = self.interceptor.context.require_store("select state").get_state()
            resume(effect.selector(state, *effect.args) if effect.selector else state)
            return None
        if isinstance(effect, RaceEffect):
            return self._run_race(task, effect, resume)
        if isinstance(effect, ForkEffect):
            child = self.scheduler.immediately(
                lambda: self._start(effect.target, effect.args, parent=task)
            )
            resume(child)
            return None
        if isinstance(effect, SpawnEffect):
            child = self.scheduler.immediately(
                lambda: self._start(effect.target, effect.args, detached=True)
            )
            resume(child)
            return None
        if isinstance(effect, CancelEffect):
            (effect.task or task).cancel()
            resume(None)
            return None
        if isinstance(effect, JoinEffect):
            return self._run_join(effect.task, resume)
        if isinstance(effect, (TakeLatestEffect, TakeEveryEffect)):
            worker = self.interceptor.watch(effect)
            helper = _take_latest if isinstance(effect, TakeLatestEffect) else _take_every
            return self._run_effect(task, ForkEffect(helper, (effect.pattern, worker, effect.args)), resume)
        if isinstance(effect, _AwaitEffect):
            return self._resolve(task, effect.awaitable, resume)
        if isinstance(effect, EffectBase):
            raise TypeError(f"Unsupported effect: {type(effect).__name__}")
        return self._resolve(task, effect, resume)

    def _run_put(self, effect: PutEffect, resume: Resume) -> None:
        def dispatch() -> None:
            try:
                result = self.interceptor.put(effect.action)
            except Exception as exc:
                resume(error=exc)
                return
            resume(result)

        self.scheduler.asap(dispatch)

    def _run_call(self, task: SagaTask, effect: CallEffect, resume: Resume) -> Canceller | None:
        try:
            result = self.interceptor.call(effect.target, *effect.args)
        except Exception as exc:
            resume(error=exc)
            return None
        return self._resolve(task, result, resume)

    def _resolve(self, task: SagaTask, result: Any, resume: Resume) -> Canceller | None:
        if inspect.isgenerator(result):
            nested = SagaTask(result, self._run_effect, name=f"{task.name}/call")
            nested.add_done_callback(lambda done: _settle_from(done, resume))
            nested.start()
            return nested.cancel
        if inspect.isawaitable(result):
            return self._await(task, result, resume)
        resume(result)
        return None

    def _await(self, task: SagaTask, awaitable: Awaitable[Any], resume: Resume) -> Canceller:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            raise
        future = asyncio.ensure_future(awaitable, loop=loop)

        def done(fut: asyncio.Future[Any]) -> None:
            if fut.cancelled():
                resume(error=TaskCancelledError(f"Awaitable in {task.name} was cancelled"))
                return
            error = fut.exception()
            if error is not None:
                resume(error=error)
                return
            resume(fut.result())

        future.add_done_callback(done)
        return future.cancel

    def _run_race(self, task: SagaTask, effect: RaceEffect, resume: Resume) -> Canceller:
        keys = list(effect.effects)
        cancellers: dict[str, Canceller] = {}
        finished = False

        def settle(key: str, value: Any = None, error: BaseException | None = None) -> None:
            nonlocal finished
            if finished:
                return
            finished = True
            for other, cancel_other in list(cancellers.items()):
                if other != key:
                    cancel_other()
            if error is not None:
                resume(error=error)
                return
            outcome = dict.fromkeys(keys)
            outcome[key] = value
            resume(outcome)

        for key in keys:
            if finished:
                break
            try:
                canceller = self._run_effect(task, effect.effects[key], functools.partial(settle, key))
            except Exception as exc:
                settle(key, error=exc)
                break
            cancellers[key] = canceller or (lambda: None)

        def cancel_all() -> None:
            nonlocal finished
            finished = True
            for cancel_one in cancellers.values():
                cancel_one()

        return cancel_all

    def _run_join(self, joined: SagaTask, resume: Resume) -> Canceller | None:
        if joined.done:
            _settle_from(joined, resume)
            return None

        def on_done(done: SagaTask) -> None:
            _settle_from(done, resume)

        joined.add_done_callback(on_done)
        return lambda: joined.remove_done_callback(on_done)


def create_saga_middleware(interceptor: EffectInterceptor | None = None) -> SagaMiddleware:
    return SagaMiddleware(interceptor)


__all__ = ["SagaMiddleware", "create_saga_middleware"]
