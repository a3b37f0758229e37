"""
TMDb integration: HTTP gateway and typed payload records.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from catalog_backend.integrations.tmdb.client import (
        ProviderError,
        ProviderNotFound,
        fetch,
        fetch_json,
        try_fetch,
    )
    from catalog_backend.integrations.tmdb.records import DeserializationError, TmdbClientError

__all__ = [
    "DeserializationError",
    "ProviderError",
    "ProviderNotFound",
    "TmdbClientError",
    "fetch",
    "fetch_json",
    "try_fetch",
]


def __getattr__(name: str):
    if name in ("DeserializationError", "TmdbClientError"):
        from catalog_backend.integrations.tmdb import records

        return getattr(records, name)
    if name in __all__:
        from catalog_backend.integrations.tmdb import client

        return getattr(client, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
