from __future__ import annotations

from typing import Any


class SagaWireError(Exception):
    """Base class for harness and runtime errors."""


class ContextNotBoundError(SagaWireError, RuntimeError):
    """Raised when the store is accessed before a harness bound one."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Trying to {operation} but the store is not available")


class UnmockedCallError(SagaWireError, LookupError):
    """Raised in strict mode when a call target has no registered substitute."""

    def __init__(self, target: Any) -> None:
        self.target = target
        name = getattr(target, "__qualname__", None) or repr(target)
        super().__init__(
            f"No mock registered for call target: {name}\n"
            f"Hint: pass `mocks=[({name}, substitute)]` to wire() or disable strict mocks"
        )


class MiddlewareNotMountedError(SagaWireError, RuntimeError):
    """Raised when a saga is started before the middleware is attached to a store."""

    def __init__(self) -> None:
        super().__init__(
            "Before running a saga, the saga middleware must be mounted on the store"
        )


class ReducerError(SagaWireError):
    """Raised for reducer contract violations."""


class TaskCancelledError(SagaWireError):
    """Raised into a joiner when the joined task was cancelled."""


__all__ = [
    "ContextNotBoundError",
    "MiddlewareNotMountedError",
    "ReducerError",
    "SagaWireError",
    "TaskCancelledError",
    "UnmockedCallError",
]
