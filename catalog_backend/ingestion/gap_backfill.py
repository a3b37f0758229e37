"""
Import movies that exist in `catalog.movie_links` (with a TMDb id) but not in
`catalog.movies`.

Rows are keyed by the link's source id, not the TMDb id, and the TMDb id is
stamped on the row. Commits once per chunk.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import requests

from catalog_backend.db.connection import transaction
from catalog_backend.ingestion.bulk_details import CancelSignal
from catalog_backend.ingestion.list_import import upsert_summary_movie
from catalog_backend.integrations.tmdb.client import try_fetch_movie_details
from catalog_backend.integrations.tmdb.records import TmdbClientError
from catalog_backend.repositories.movie_links import list_links_missing_movies
from catalog_backend.repositories.movies import set_movie_tmdb_id
from catalog_backend.utils.batching import chunked

logger = logging.getLogger(__name__)

BACKFILL_LIST_TYPE = "links-missing"
DEFAULT_BATCH_SIZE = 200


@dataclass(frozen=True)
class BackfillResult:
    imported: int = 0
    skipped: int = 0
    failed: int = 0
    cancelled: bool = False
    last_id: int | None = None


def backfill_missing_movies(
    conn: Any,
    *,
    max_movies: int = 1000,
    batch_size: int = DEFAULT_BATCH_SIZE,
    api_key: str | None = None,
    session: requests.Session | None = None,
    cancel_event: CancelSignal | None = None,
) -> BackfillResult:
    """
    Backfill up to `max_movies` gaps in source-id order, `batch_size` per commit.

    Gaps TMDb does not know are skipped. Other provider failures are logged and
    counted as failed; store errors propagate and abort the current chunk.
    """
    if max_movies <= 0:
        return BackfillResult()
    if batch_size <= 0:
        batch_size = DEFAULT_BATCH_SIZE

    with transaction(conn):
        gaps = list_links_missing_movies(conn, limit=max_movies)
    logger.info("Gap backfill: %d linked movies missing locally", len(gaps))

    imported = skipped = failed = 0
    last_id: int | None = None
    cancelled = False

    for chunk in chunked(gaps, batch_size):
        if cancel_event is not None and cancel_event.is_set():
            cancelled = True
            break
        with transaction(conn):
            for link in chunk:
                if cancel_event is not None and cancel_event.is_set():
                    cancelled = True
                    break
                movie_id = int(link["movie_id"])
                tmdb_id = int(link["tmdb_id"])
                last_id = movie_id
                try:
                    details = try_fetch_movie_details(tmdb_id, api_key=api_key, session=session)
                except TmdbClientError as exc:
                    logger.warning("Backfill fetch failed for movie id=%s (tmdb %s): %s", movie_id, tmdb_id, exc)
                    failed += 1
                    continue
                if details is None:
                    skipped += 1
                    continue

                now = datetime.now(UTC)
                upsert_summary_movie(
                    conn,
                    details.to_summary(movie_id=movie_id),
                    movie_id=movie_id,
                    tmdb_id=tmdb_id,
                    list_type=BACKFILL_LIST_TYPE,
                    page=1,
                    position=0,
                    now=now,
                    genres=details.genres,
                    cast=details.cast,
                    videos=details.videos,
                )
                set_movie_tmdb_id(conn, movie_id, tmdb_id, updated_at=now)
                imported += 1
        logger.info("Backfill checkpoint: imported=%d skipped=%d failed=%d last id=%s", imported, skipped, failed, last_id)
        if cancelled:
            break

    return BackfillResult(imported=imported, skipped=skipped, failed=failed, cancelled=cancelled, last_id=last_id)
