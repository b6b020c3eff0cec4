"""Identity-keyed substitution table for call targets and watched handlers."""

from __future__ import annotations

import inspect
import types
from collections.abc import Callable, Hashable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Final

from saga_wire.effects.call import CallTarget

MockPair = tuple[CallTarget, Callable[..., Any]]


class MockResolution:
    """Outcome of a registry lookup: ``Substituted`` or ``UNMAPPED``."""

    __slots__ = ()

    def is_substituted(self) -> bool:
        return isinstance(self, Substituted)

    def __bool__(self) -> bool:
        return self.is_substituted()


@dataclass(frozen=True)
class Substituted(MockResolution):
    substitute: Callable[..., Any]


class Unmapped(MockResolution):
    """Singleton: no substitute is registered for the target."""

    __slots__ = ()
    _instance: Unmapped | None = None

    def __new__(cls) -> Unmapped:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Unmapped()"


UNMAPPED: Final[Unmapped] = Unmapped()


def _function_of(method: Any) -> Any:
    return method.__func__ if inspect.ismethod(method) else method


def target_key(target: Any) -> Hashable:
    """Identity key for a call target.

    Method targets are keyed by the owner and the underlying function, so
    ``(client, "fetch")``, ``(client, Client.fetch)`` and ``call(client.fetch)``
    all share a key, and an alias such as ``get = fetch`` resolves to it too.
    """
    if isinstance(target, tuple) and len(target) == 2:
        owner, method = target
        if isinstance(method, str):
            resolved = getattr(type(owner), method, None)
            if resolved is None:
                return ("attribute", id(owner), method)
            return ("method", id(owner), id(_function_of(resolved)))
        return ("method", id(owner), id(_function_of(method)))
    if inspect.ismethod(target):
        return ("method", id(target.__self__), id(target.__func__))
    return ("object", id(target))


def invoke_target(target: CallTarget, args: tuple[Any, ...]) -> Any:
    """Invoke the real target; ``(object, method)`` pairs run bound to the object."""
    if isinstance(target, tuple):
        owner, method = target
        if isinstance(method, str):
            return getattr(owner, method)(*args)
        if inspect.ismethod(method) and method.__self__ is owner:
            return method(*args)
        return types.MethodType(method, owner)(*args)
    return target(*args)


class MockRegistry:
    """Table of ``(original target -> substitute)`` pairs keyed by identity.

    The registry keeps a reference to every registered target, so ``id``
    based keys cannot be recycled while the registry is alive.
    """

    def __init__(self, mappings: Iterable[MockPair] = (), *, strict: bool = False) -> None:
        self.strict = strict
        self._table: dict[Hashable, tuple[Any, Callable[..., Any]]] = {}
        self.update(mappings)

    def register(self, target: CallTarget, substitute: Callable[..., Any]) -> None:
        if not callable(substitute):
            raise TypeError(f"substitute must be callable, got {type(substitute).__name__}")
        self._table[target_key(target)] = (target, substitute)

    def update(self, mappings: Iterable[MockPair]) -> None:
        for pair in mappings or ():
            target, substitute = pair
            self.register(target, substitute)

    def resolve(self, target: CallTarget) -> Substituted | Unmapped:
        entry = self._table.get(target_key(target))
        if entry is None:
            return UNMAPPED
        return Substituted(entry[1])

    def targets(self) -> list[Any]:
        return [target for target, _ in self._table.values()]

    def __contains__(self, target: object) -> bool:
        return target_key(target) in self._table

    def __len__(self) -> int:
        return len(self._table)


def structured_mocks(
    original: Mapping[str, CallTarget],
    mocks: Mapping[str, Callable[..., Any] | None],
) -> list[MockPair]:
    """Pair ``original[name]`` with ``mocks[name]`` for every name in both.

    Names only present in ``mocks`` are dropped, and so are ``None``
    substitutes, so a partial override can be declared against a known set of
    real functions.
    """
    return [
        (original[name], substitute)
        for name, substitute in mocks.items()
        if name in original and substitute is not None
    ]


__all__ = [
    "MockPair",
    "MockRegistry",
    "MockResolution",
    "Substituted",
    "UNMAPPED",
    "Unmapped",
    "invoke_target",
    "structured_mocks",
    "target_key",
]
