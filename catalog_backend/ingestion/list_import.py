"""Import TMDb ranked list pages (popular, top_rated, upcoming, ...)."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import requests

from catalog_backend.db.connection import transaction
from catalog_backend.ingestion.merge import merge_movie
from catalog_backend.ingestion.relations import reconcile_movie_relations
from catalog_backend.integrations.tmdb.client import fetch_movie_list_page
from catalog_backend.integrations.tmdb.records import TmdbCastMember, TmdbGenre, TmdbMovieSummary, TmdbVideo
from catalog_backend.repositories.list_entries import upsert_list_entry
from catalog_backend.repositories.movie_links import find_link_by_tmdb_id
from catalog_backend.repositories.movies import find_movie, upsert_movie

logger = logging.getLogger(__name__)

KNOWN_LIST_TYPES = ("popular", "top_rated", "upcoming", "now_playing")


@dataclass(frozen=True)
class ListImportResult:
    list_type: str
    pages: int
    movies: int


def _now_utc() -> datetime:
    return datetime.now(UTC)


def resolve_movie_id_for_tmdb_id(conn: Any, tmdb_id: int) -> int:
    """
    Source id for a TMDb id: the mapped source id when a link exists,
    otherwise the TMDb id itself.
    """
    link = find_link_by_tmdb_id(conn, tmdb_id)
    if link and link.get("movie_id") is not None:
        return int(link["movie_id"])
    return int(tmdb_id)


def upsert_summary_movie(
    conn: Any,
    summary: TmdbMovieSummary,
    *,
    movie_id: int,
    tmdb_id: int,
    list_type: str,
    page: int,
    position: int,
    now: datetime | None = None,
    genres: Iterable[TmdbGenre] = (),
    cast: Iterable[TmdbCastMember] | None = None,
    videos: Iterable[TmdbVideo] | None = None,
) -> dict[str, Any]:
    """
    Merge a summary into `catalog.movies`, replace its relations and record its list position.

    List pages only carry genre ids; callers holding a full record pass its
    named genres, cast and videos as well.
    """
    existing = find_movie(conn, movie_id)
    movie = merge_movie(existing, summary, movie_id=movie_id, tmdb_id=tmdb_id, now=now or _now_utc())
    row = upsert_movie(conn, movie)
    reconcile_movie_relations(conn, movie.id, genre_ids=summary.genre_ids, genres=genres, cast=cast, videos=videos)
    upsert_list_entry(conn, movie_id=movie.id, list_type=list_type, page=page, position=position)
    return row


def import_movie_list(
    conn: Any,
    list_type: str,
    pages: int,
    *,
    api_key: str | None = None,
    session: requests.Session | None = None,
) -> ListImportResult:
    """
    Walk pages 1..`pages` of a ranked list, upserting each movie in page order.

    Commits once per page.
    """
    list_type = str(list_type or "").strip()
    if not list_type:
        raise ValueError("list_type is required")
    if list_type not in KNOWN_LIST_TYPES:
        logger.warning("Importing unrecognised TMDb list type %r", list_type)

    movies = 0
    pages_done = 0
    for page in range(1, max(0, int(pages)) + 1):
        listing = fetch_movie_list_page(list_type, page, api_key=api_key, session=session)
        now = _now_utc()
        with transaction(conn):
            for position, summary in enumerate(listing.results):
                movie_id = resolve_movie_id_for_tmdb_id(conn, summary.id)
                upsert_summary_movie(
                    conn,
                    summary,
                    movie_id=movie_id,
                    tmdb_id=summary.id,
                    list_type=list_type,
                    page=page,
                    position=position,
                    now=now,
                )
                movies += 1
        pages_done += 1
        logger.info("Imported %s page %d (%d movies)", list_type, page, len(listing.results))

        if listing.total_pages and page >= listing.total_pages:
            break

    return ListImportResult(list_type=list_type, pages=pages_done, movies=movies)
