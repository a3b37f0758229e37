from __future__ import annotations

from datetime import datetime
from typing import Any

from catalog_backend.db.connection import LocalStoreError, execute, fetch_all, fetch_one
from catalog_backend.models.movies import CatalogMovie

_MOVIE_COLUMNS = (
    "id",
    "tmdb_id",
    "title",
    "overview",
    "poster_path",
    "backdrop_path",
    "release_date",
    "popularity",
    "vote_average",
    "vote_count",
    "original_language",
    "runtime",
    "created_at",
    "updated_at",
)


def find_movie(conn: Any, movie_id: int) -> dict[str, Any] | None:
    return fetch_one(
        conn,
        "SELECT * FROM catalog.movies WHERE id = %s",
        (int(movie_id),),
        context=f"finding movie id={movie_id}",
    )


def upsert_movie(conn: Any, movie: CatalogMovie) -> dict[str, Any]:
    """
    Insert or fully update a movie row keyed by `id`.

    `created_at` is only written on insert.
    """
    row = movie.to_row()
    columns = ", ".join(_MOVIE_COLUMNS)
    placeholders = ", ".join(f"%({c})s" for c in _MOVIE_COLUMNS)
    updates = ", ".join(f"{c} = EXCLUDED.{c}" for c in _MOVIE_COLUMNS if c not in ("id", "created_at"))
    result = fetch_one(
        conn,
        f"INSERT INTO catalog.movies ({columns}) VALUES ({placeholders}) "
        f"ON CONFLICT (id) DO UPDATE SET {updates} RETURNING *",
        row,
        context=f"upserting movie id={movie.id}",
    )
    if result is None:
        raise LocalStoreError(f"Upsert returned no data for movie id={movie.id}.")
    return result


def set_movie_tmdb_id(conn: Any, movie_id: int, tmdb_id: int, *, updated_at: datetime) -> None:
    execute(
        conn,
        "UPDATE catalog.movies SET tmdb_id = %s, updated_at = %s WHERE id = %s",
        (int(tmdb_id), updated_at, int(movie_id)),
        context=f"stamping tmdb_id on movie id={movie_id}",
    )


def list_movie_ids_with_tmdb_mapping(
    conn: Any,
    *,
    start_after_id: int | None = None,
    limit: int,
) -> list[int]:
    """
    Movie ids ordered ascending that carry a TMDb id, on the row or via `movie_links`.

    `start_after_id` is an exclusive resume cursor.
    """
    rows = fetch_all(
        conn,
        """
        SELECT m.id
        FROM catalog.movies m
        LEFT JOIN catalog.movie_links l ON l.movie_id = m.id
        WHERE (m.tmdb_id IS NOT NULL OR l.tmdb_id IS NOT NULL)
          AND (%(after)s::integer IS NULL OR m.id > %(after)s::integer)
        ORDER BY m.id
        LIMIT %(limit)s
        """,
        {"after": start_after_id, "limit": max(0, int(limit))},
        context="listing movies for detail sync",
    )
    return [int(r["id"]) for r in rows]
