"""Import or refresh movies for every `catalog.movie_links` row that carries a TMDb id."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import requests

from catalog_backend.db.connection import transaction
from catalog_backend.ingestion.bulk_details import CancelSignal
from catalog_backend.ingestion.merge import merge_movie
from catalog_backend.ingestion.relations import reconcile_movie_relations
from catalog_backend.integrations.tmdb.client import try_fetch_movie_details
from catalog_backend.integrations.tmdb.records import TmdbClientError
from catalog_backend.repositories.movie_links import list_links_with_tmdb_id
from catalog_backend.repositories.movies import find_movie, upsert_movie
from catalog_backend.utils.batching import chunked

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 200


@dataclass(frozen=True)
class LinksImportResult:
    imported: int = 0
    skipped: int = 0
    failed: int = 0
    cancelled: bool = False
    last_id: int | None = None


def import_movies_from_links(
    conn: Any,
    *,
    start_after_id: int | None = None,
    max_movies: int | None = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
    api_key: str | None = None,
    session: requests.Session | None = None,
    cancel_event: CancelSignal | None = None,
) -> LinksImportResult:
    """
    Upsert a movie row (keyed by source id) from TMDb's plain movie record for each link.

    Only scalar fields and genre links are written; cast and videos are left to
    the detail sync. Commits every `batch_size` links.
    """
    if max_movies is not None and max_movies <= 0:
        return LinksImportResult()
    if batch_size <= 0:
        batch_size = DEFAULT_BATCH_SIZE

    with transaction(conn):
        links = list_links_with_tmdb_id(conn, start_after_id=start_after_id, limit=max_movies)
    logger.info("Links import: %d links after id=%s", len(links), start_after_id)

    imported = skipped = failed = 0
    last_id: int | None = None
    cancelled = False

    for chunk in chunked(links, batch_size):
        with transaction(conn):
            for link in chunk:
                if cancel_event is not None and cancel_event.is_set():
                    cancelled = True
                    break
                movie_id = int(link["movie_id"])
                tmdb_id = int(link["tmdb_id"])
                last_id = movie_id
                try:
                    details = try_fetch_movie_details(tmdb_id, include_nested=False, api_key=api_key, session=session)
                except TmdbClientError as exc:
                    logger.warning("Links import fetch failed for movie id=%s (tmdb %s): %s", movie_id, tmdb_id, exc)
                    failed += 1
                    continue
                if details is None:
                    skipped += 1
                    continue

                movie = merge_movie(
                    find_movie(conn, movie_id),
                    details,
                    movie_id=movie_id,
                    tmdb_id=tmdb_id,
                    now=datetime.now(UTC),
                )
                upsert_movie(conn, movie)
                reconcile_movie_relations(conn, movie_id, genre_ids=details.genre_ids, genres=details.genres)
                imported += 1
        logger.info("Links import checkpoint: imported=%d skipped=%d failed=%d last id=%s", imported, skipped, failed, last_id)
        if cancelled:
            break

    return LinksImportResult(imported=imported, skipped=skipped, failed=failed, cancelled=cancelled, last_id=last_id)
