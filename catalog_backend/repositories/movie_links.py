"""Repository for `catalog.movie_links` (source-system id -> external ids)."""
from __future__ import annotations

from typing import Any

from catalog_backend.db.connection import fetch_all, fetch_one


def find_link(conn: Any, movie_id: int) -> dict[str, Any] | None:
    return fetch_one(
        conn,
        "SELECT movie_id, imdb_id, tmdb_id FROM catalog.movie_links WHERE movie_id = %s",
        (int(movie_id),),
        context=f"finding link for movie id={movie_id}",
    )


def find_link_by_tmdb_id(conn: Any, tmdb_id: int) -> dict[str, Any] | None:
    """Lowest source id mapped to a TMDb id, if any."""
    return fetch_one(
        conn,
        "SELECT movie_id, imdb_id, tmdb_id FROM catalog.movie_links WHERE tmdb_id = %s ORDER BY movie_id LIMIT 1",
        (int(tmdb_id),),
        context=f"finding link for tmdb_id={tmdb_id}",
    )


def list_links_with_tmdb_id(
    conn: Any,
    *,
    start_after_id: int | None = None,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    return fetch_all(
        conn,
        """
        SELECT movie_id, imdb_id, tmdb_id
        FROM catalog.movie_links
        WHERE tmdb_id IS NOT NULL
          AND (%(after)s::integer IS NULL OR movie_id > %(after)s::integer)
        ORDER BY movie_id
        LIMIT %(limit)s
        """,
        {"after": start_after_id, "limit": None if limit is None else max(0, int(limit))},
        context="listing links with tmdb ids",
    )


def list_links_missing_movies(conn: Any, *, limit: int) -> list[dict[str, Any]]:
    """Links that carry a TMDb id but have no `catalog.movies` row yet (the gap set)."""
    return fetch_all(
        conn,
        """
        SELECT l.movie_id, l.imdb_id, l.tmdb_id
        FROM catalog.movie_links l
        LEFT JOIN catalog.movies m ON m.id = l.movie_id
        WHERE l.tmdb_id IS NOT NULL AND m.id IS NULL
        ORDER BY l.movie_id
        LIMIT %(limit)s
        """,
        {"limit": max(0, int(limit))},
        context="listing links missing movies",
    )
