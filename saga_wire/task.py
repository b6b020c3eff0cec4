"""Per-saga state machine driving a generator through its effects."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from enum import Enum, auto
from typing import Any, Optional

logger = logging.getLogger(__name__)

Resume = Callable[..., None]
Canceller = Callable[[], None]
EffectRunner = Callable[["SagaTask", Any, Resume], Optional[Canceller]]


def _noop() -> None:
    return None


class TaskStatus(Enum):
    RUNNING = auto()
    SUSPENDED = auto()
    CANCELLED = auto()
    COMPLETED = auto()
    ABORTED = auto()


class SagaTask:
    """A running saga.

    The task alternates between ``RUNNING`` (the generator is executing) and
    ``SUSPENDED`` (waiting on ``awaiting``) until it ends in ``COMPLETED``,
    ``CANCELLED`` or ``ABORTED``. Attached children must finish before the
    task completes; an aborted child aborts the task; cancelling the task
    cancels its children and the effect it is suspended on.
    """

    def __init__(
        self,
        iterator: Generator[Any, Any, Any],
        run_effect: EffectRunner,
        *,
        name: str = "saga",
        detached: bool = False,
    ) -> None:
        self.name = name
        self.detached = detached
        self.status = TaskStatus.RUNNING
        self.result: Any = None
        self.error: BaseException | None = None
        self.awaiting: Any = None
        self._iterator = iterator
        self._run_effect = run_effect
        self._children: list[SagaTask] = []
        self._main_done = False
        self._cancel_pending: Canceller = _noop
        self._callbacks: list[Callable[[SagaTask], None]] = []

    def __repr__(self) -> str:
        return f"SagaTask(name={self.name!r}, status={self.status.name})"

    @property
    def is_running(self) -> bool:
        return self.status in (TaskStatus.RUNNING, TaskStatus.SUSPENDED)

    @property
    def done(self) -> bool:
        return not self.is_running

    @property
    def children(self) -> tuple[SagaTask, ...]:
        return tuple(self._children)

    def start(self) -> None:
        logger.debug("Starting saga task %s", self.name)
        self._step(None, None)

    def attach(self, child: SagaTask) -> None:
        self._children.append(child)
        child.add_done_callback(self._on_child_done)

    def add_done_callback(self, callback: Callable[[SagaTask], None]) -> None:
        if self.done:
            callback(self)
            return
        self._callbacks.append(callback)

    def remove_done_callback(self, callback: Callable[[SagaTask], None]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def cancel(self) -> None:
        if not self.is_running:
            return
        logger.debug("Cancelling saga task %s", self.name)
        self.status = TaskStatus.CANCELLED
        self._teardown()
        self._finish()

    def _step(self, value: Any, error: BaseException | None) -> None:
        while not self._main_done:
            self.status = TaskStatus.RUNNING
            self.awaiting = None
            try:
                if error is not None:
                    effect = self._iterator.throw(error)
                else:
                    effect = self._iterator.send(value)
            except StopIteration as stop:
                self._main_done = True
                self.result = stop.value
                self._complete_if_idle()
                return
            except Exception as exc:
                self._main_done = True
                self._abort(exc)
                return
            self.status = TaskStatus.SUSPENDED
            self.awaiting = effect
            outcome = self._digest(effect)
            if outcome is None:
                return
            value, error = outcome

    def _digest(self, effect: Any) -> tuple[Any, BaseException | None] | None:
        """Hand ``effect`` to the runner.

        Returns the outcome when the runner resumed synchronously, so the
        caller keeps stepping in its own loop; returns None when the task
        stays suspended or has ended.
        """
        settled = False
        in_runner = True
        outcome: tuple[Any, BaseException | None] | None = None

        def resume(value: Any = None, error: BaseException | None = None) -> None:
            nonlocal settled, outcome
            if settled or self._main_done:
                return
            settled = True
            self._cancel_pending = _noop
            if in_runner:
                outcome = (value, error)
            else:
                self._step(value, error)

        try:
            canceller = self._run_effect(self, effect, resume)
        except Exception as exc:
            in_runner = False
            if not settled and not self._main_done:
                settled = True
                return (None, exc)
            if not self.is_running:
                raise
            self._abort(exc)
            return None
        in_runner = False
        if settled:
            return outcome
        if not self._main_done:
            self._cancel_pending = canceller or _noop
        return None

    def _teardown(self) -> None:
        close = not self._main_done
        self._main_done = True
        self.awaiting = None
        for child in list(self._children):
            child.cancel()
        cancel_pending, self._cancel_pending = self._cancel_pending, _noop
        cancel_pending()
        if close:
            # finally blocks of the saga run here
            self._iterator.close()

    def _abort(self, error: BaseException) -> None:
        if not self.is_running:
            return
        logger.debug("Saga task %s aborted: %r", self.name, error)
        self.error = error
        self.status = TaskStatus.ABORTED
        self._teardown()
        self._finish()

    def _complete_if_idle(self) -> None:
        if not self._main_done or not self.is_running:
            return
        if any(child.is_running for child in self._children):
            return
        self.status = TaskStatus.COMPLETED
        self._finish()

    def _on_child_done(self, child: SagaTask) -> None:
        if child in self._children:
            self._children.remove(child)
        if not self.is_running:
            return
        if child.status is TaskStatus.ABORTED:
            self._abort(child.error)
            return
        self._complete_if_idle()

    def _finish(self) -> None:
        logger.debug("Saga task %s finished with %s", self.name, self.status.name)
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(self)


__all__ = ["Canceller", "EffectRunner", "Resume", "SagaTask", "TaskStatus"]
