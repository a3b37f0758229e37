"""Fold a full TMDb movie record (videos + credits) into a tracked movie."""
from __future__ import annotations

import logging
from datetime import UTC, datetime
from enum import Enum
from typing import Any

import requests

from catalog_backend.db.connection import transaction
from catalog_backend.ingestion.merge import merge_movie
from catalog_backend.ingestion.relations import reconcile_movie_relations
from catalog_backend.integrations.tmdb.client import try_fetch_movie_details
from catalog_backend.integrations.tmdb.records import TmdbMovieDetails
from catalog_backend.repositories.movie_links import find_link
from catalog_backend.repositories.movies import find_movie, upsert_movie

logger = logging.getLogger(__name__)


class DetailOutcome(str, Enum):
    UPDATED = "updated"
    NOT_TRACKED = "not_tracked"
    NOT_FOUND = "not_found"


def _now_utc() -> datetime:
    return datetime.now(UTC)


def resolve_tmdb_id(conn: Any, movie_row: dict[str, Any]) -> int:
    """Stored TMDb id, else the mapped one, else assume the source id is TMDb's."""
    tmdb_id = movie_row.get("tmdb_id")
    if tmdb_id is not None:
        return int(tmdb_id)
    link = find_link(conn, int(movie_row["id"]))
    if link and link.get("tmdb_id") is not None:
        return int(link["tmdb_id"])
    return int(movie_row["id"])


def apply_movie_details(
    conn: Any,
    existing: dict[str, Any] | None,
    details: TmdbMovieDetails,
    *,
    movie_id: int,
    now: datetime | None = None,
) -> dict[str, Any]:
    movie = merge_movie(existing, details, movie_id=movie_id, tmdb_id=details.id, now=now or _now_utc())
    row = upsert_movie(conn, movie)
    reconcile_movie_relations(
        conn,
        movie.id,
        genre_ids=details.genre_ids,
        genres=details.genres,
        cast=details.cast,
        videos=details.videos,
    )
    return row


def import_movie_details(
    conn: Any,
    movie_id: int,
    *,
    api_key: str | None = None,
    session: requests.Session | None = None,
) -> DetailOutcome:
    """
    Refresh one movie's scalar fields, genres, cast and videos from TMDb.

    Untracked movies and movies TMDb no longer knows are left alone. Provider
    and store errors propagate.
    """
    with transaction(conn):
        existing = find_movie(conn, movie_id)
        if existing is None:
            return DetailOutcome.NOT_TRACKED
        tmdb_id = resolve_tmdb_id(conn, existing)

    details = try_fetch_movie_details(tmdb_id, api_key=api_key, session=session)
    if details is None:
        logger.info("TMDb has no movie %s (movie id=%s); skipping", tmdb_id, movie_id)
        return DetailOutcome.NOT_FOUND

    with transaction(conn):
        existing = find_movie(conn, movie_id)
        if existing is None:
            return DetailOutcome.NOT_TRACKED
        apply_movie_details(conn, existing, details, movie_id=int(movie_id))
    return DetailOutcome.UPDATED
