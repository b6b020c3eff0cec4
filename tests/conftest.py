"""Shared fixtures for saga-wire tests."""

import pytest

from saga_wire.config import SETTLE_DELAY_ENV_KEY, STRICT_MOCKS_ENV_KEY


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(SETTLE_DELAY_ENV_KEY, raising=False)
    monkeypatch.delenv(STRICT_MOCKS_ENV_KEY, raising=False)
