from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tests.helpers.party_store import FakeIdentity, FakePartyStore, host_viewer

if TYPE_CHECKING:
    from collections.abc import Iterator

_ENV_VARS = (
    "SANTAPY_API_URL",
    "SANTAPY_AUTH_TOKEN",
    "SANTAPY_TIMEOUT_SECONDS",
    "SANTAPY_HTTP_CACHE",
    "SANTAPY_DATA_DIR",
)


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def store() -> FakePartyStore:
    return FakePartyStore()


@pytest.fixture
def host_identity() -> FakeIdentity:
    return FakeIdentity(host_viewer())


@pytest.fixture
def anonymous_identity() -> FakeIdentity:
    return FakeIdentity()
