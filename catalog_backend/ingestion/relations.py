"""
Full-replace reconciliation of a movie's dependent rows.

Genre links, cast credits and videos are never diffed: each sync clears the
movie's rows and inserts the new set, inside one savepoint per movie.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from catalog_backend.db.connection import savepoint
from catalog_backend.ingestion.merge import merge_credit_person
from catalog_backend.integrations.tmdb.records import TmdbCastMember, TmdbGenre, TmdbVideo
from catalog_backend.repositories.genres import ensure_genres_exist, replace_movie_genres, upsert_genre
from catalog_backend.repositories.movie_cast import replace_movie_cast
from catalog_backend.repositories.movie_videos import replace_movie_videos
from catalog_backend.repositories.people import find_person, upsert_person

MAX_CAST_MEMBERS = 20
ACCEPTED_VIDEO_SITE = "YouTube"

MISSING_VIDEO_KEY = "missing-key"
UNKNOWN_VIDEO_SITE = "unknown-site"
UNKNOWN_VIDEO_TYPE = "unknown-type"
UNKNOWN_VIDEO_NAME = "unknown-name"


def dedupe_genre_ids(genre_ids: Iterable[int]) -> list[int]:
    seen: set[int] = set()
    ordered: list[int] = []
    for genre_id in genre_ids:
        genre_id = int(genre_id)
        if genre_id in seen:
            continue
        seen.add(genre_id)
        ordered.append(genre_id)
    return ordered


def select_top_cast(cast: Iterable[TmdbCastMember], *, limit: int = MAX_CAST_MEMBERS) -> list[TmdbCastMember]:
    """Top-billed members by TMDb `order`; unranked credits come last, ties keep payload order."""
    ranked = sorted(cast, key=lambda member: (member.order is None, member.order or 0))
    selected: list[TmdbCastMember] = []
    seen: set[tuple[int, int | None]] = set()
    for member in ranked:
        key = (member.id, member.order)
        if key in seen:
            continue
        seen.add(key)
        selected.append(member)
        if len(selected) >= limit:
            break
    return selected


def normalize_videos(videos: Iterable[TmdbVideo], *, site: str = ACCEPTED_VIDEO_SITE) -> list[dict[str, str]]:
    """Keep videos hosted on `site` and replace missing fields with sentinels."""
    wanted = site.casefold()
    rows: list[dict[str, str]] = []
    for video in videos:
        if (video.site or "").casefold() != wanted:
            continue
        rows.append(
            {
                "key": video.key or MISSING_VIDEO_KEY,
                "site": video.site or UNKNOWN_VIDEO_SITE,
                "type": video.type or UNKNOWN_VIDEO_TYPE,
                "name": video.name or UNKNOWN_VIDEO_NAME,
            }
        )
    return rows


def _reconcile_cast(conn: Any, movie_id: int, cast: Iterable[TmdbCastMember]) -> None:
    rows: list[dict[str, Any]] = []
    next_order = 0
    for member in select_top_cast(cast):
        person = merge_credit_person(find_person(conn, member.id), member)
        upsert_person(conn, person)
        # Unranked credits are numbered after the last ranked one.
        cast_order = member.order if member.order is not None else next_order
        next_order = max(next_order, cast_order + 1)
        rows.append({"person_id": person.id, "cast_order": cast_order, "character": member.character})
    replace_movie_cast(conn, movie_id, rows)


def reconcile_movie_relations(
    conn: Any,
    movie_id: int,
    *,
    genre_ids: Iterable[int],
    genres: Iterable[TmdbGenre] = (),
    cast: Iterable[TmdbCastMember] | None = None,
    videos: Iterable[TmdbVideo] | None = None,
) -> None:
    """
    Replace the movie's genre links, and its cast and videos when supplied.

    `cast=None` / `videos=None` leave those relations untouched (list pages do
    not carry them). Named `genres` are upserted so the reference table keeps
    TMDb's names; bare ids get placeholder rows until the next genre sync.
    """
    ids = dedupe_genre_ids(genre_ids)
    with savepoint(conn, "reconcile_movie"):
        for genre in genres:
            if genre.name:
                upsert_genre(conn, genre.id, genre.name)
        ensure_genres_exist(conn, ids)
        replace_movie_genres(conn, movie_id, ids)

        if cast is not None:
            _reconcile_cast(conn, movie_id, cast)

        if videos is not None:
            replace_movie_videos(conn, movie_id, normalize_videos(videos))
