"""Task queue that serialises nested dispatches issued while sagas are stepping."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from typing import Any


class Scheduler:
    """FIFO queue guarded by a semaphore.

    ``asap`` runs the task now unless another scheduled task is executing, in
    which case it runs once that task (and everything queued before it) is
    done. ``immediately`` runs the task now and defers anything it schedules
    until it returns.
    """

    def __init__(self) -> None:
        self._queue: deque[Callable[[], Any]] = deque()
        self._semaphore = 0

    @property
    def pending(self) -> int:
        return len(self._queue)

    def asap(self, task: Callable[[], Any]) -> None:
        self._queue.append(task)
        if not self._semaphore:
            self._suspend()
            self._flush()

    def immediately(self, task: Callable[[], Any]) -> Any:
        try:
            self._suspend()
            return task()
        finally:
            self._flush()

    def _suspend(self) -> None:
        self._semaphore += 1

    def _release(self) -> None:
        self._semaphore -= 1

    def _exec(self, task: Callable[[], Any]) -> None:
        try:
            self._suspend()
            task()
        finally:
            self._release()

    def _flush(self) -> None:
        self._release()
        while not self._semaphore and self._queue:
            self._exec(self._queue.popleft())


__all__ = ["Scheduler"]
