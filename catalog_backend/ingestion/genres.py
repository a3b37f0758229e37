from __future__ import annotations

import logging
from typing import Any

import requests

from catalog_backend.db.connection import transaction
from catalog_backend.integrations.tmdb.client import fetch_genres
from catalog_backend.repositories.genres import upsert_genre

logger = logging.getLogger(__name__)


def sync_genres(conn: Any, *, api_key: str | None = None, session: requests.Session | None = None) -> int:
    """Upsert TMDb's movie genre list (ids and names); returns how many genres were written."""
    genres = fetch_genres(api_key=api_key, session=session)
    written = 0
    with transaction(conn):
        for genre in genres:
            if not genre.name:
                continue
            upsert_genre(conn, genre.id, genre.name)
            written += 1
    logger.info("Synced %d TMDb genres", written)
    return written
