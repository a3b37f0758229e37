from __future__ import annotations

import pytest

from catalog_backend.ingestion import (
    account_lists,
    bulk_details,
    gap_backfill,
    genres,
    links_import,
    list_import,
    movie_details,
    people,
    relations,
)
from tests.fakes import FakeCatalogStore, FakeConnection

INGESTION_MODULES = (
    account_lists,
    bulk_details,
    gap_backfill,
    genres,
    links_import,
    list_import,
    movie_details,
    people,
    relations,
)


@pytest.fixture
def store(monkeypatch: pytest.MonkeyPatch) -> FakeCatalogStore:
    """In-memory catalog wired into every ingestion module."""
    fake = FakeCatalogStore()
    fake.install(monkeypatch, *INGESTION_MODULES)
    return fake


@pytest.fixture
def conn(store: FakeCatalogStore) -> FakeConnection:
    return FakeConnection(store)


@pytest.fixture(autouse=True)
def _tmdb_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TMDB_API_KEY", "test-key")
    monkeypatch.delenv("TMDB_API_BASE_URL", raising=False)
