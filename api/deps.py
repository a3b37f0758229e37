"""
Dependency injection for the catalog database connection and TMDb settings.
"""
from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from typing import Annotated, Any

from fastapi import Depends, HTTPException

from catalog_backend.db.connection import DatabaseConnectionError, connect
from catalog_backend.utils.env import load_env

# Load environment variables if running standalone
load_env()

logger = logging.getLogger(__name__)


def get_db() -> Iterator[Any]:
    """
    Yields a psycopg2 connection for the request and closes it afterwards.

    Jobs commit their own work; anything left uncommitted is discarded on close.
    """
    try:
        conn = connect()
    except DatabaseConnectionError as exc:
        logger.error("Catalog database unavailable: %s", exc)
        raise HTTPException(status_code=503, detail="Catalog database unavailable") from exc
    try:
        yield conn
    finally:
        conn.close()


def get_tmdb_api_key() -> str:
    key = (os.getenv("TMDB_API_KEY") or "").strip()
    if not key:
        raise HTTPException(status_code=503, detail="TMDB_API_KEY is not configured")
    return key


# Type aliases for dependency injection
CatalogDb = Annotated[Any, Depends(get_db)]
TmdbApiKey = Annotated[str, Depends(get_tmdb_api_key)]
