from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from saga_wire.errors import ContextNotBoundError
from saga_wire.mocks import MockPair, MockRegistry

if TYPE_CHECKING:  # pragma: no cover - type-only import to avoid a runtime cycle
    from saga_wire.store import Store


@dataclass
class WireContext:
    """Active store and mock table for one harness instance.

    Passed explicitly to the interceptor and projector, so two harnesses in
    the same process never see each other's store or mocks.
    """

    registry: MockRegistry = field(default_factory=MockRegistry)
    store: Store | None = None

    @property
    def is_bound(self) -> bool:
        return self.store is not None

    def install(self, store: Store, mappings: Iterable[MockPair] = ()) -> None:
        self.store = store
        self.registry.update(mappings)

    def require_store(self, operation: str) -> Store:
        if self.store is None:
            raise ContextNotBoundError(operation)
        return self.store


__all__ = ["WireContext"]
