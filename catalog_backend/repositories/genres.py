from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from catalog_backend.db.connection import execute, fetch_all

UNKNOWN_GENRE = "(unknown genre)"


def upsert_genre(conn: Any, genre_id: int, name: str) -> None:
    execute(
        conn,
        "INSERT INTO catalog.genres (id, name) VALUES (%s, %s) ON CONFLICT (id) DO UPDATE SET name = EXCLUDED.name",
        (int(genre_id), name),
        context=f"upserting genre id={genre_id}",
    )


def ensure_genres_exist(conn: Any, genre_ids: Iterable[int]) -> None:
    """Insert placeholder rows for genre ids not seen yet; a genre sync renames them later."""
    for genre_id in genre_ids:
        execute(
            conn,
            "INSERT INTO catalog.genres (id, name) VALUES (%s, %s) ON CONFLICT (id) DO NOTHING",
            (int(genre_id), UNKNOWN_GENRE),
            context=f"ensuring genre id={genre_id}",
        )


def replace_movie_genres(conn: Any, movie_id: int, genre_ids: Iterable[int]) -> None:
    execute(
        conn,
        "DELETE FROM catalog.movie_genres WHERE movie_id = %s",
        (int(movie_id),),
        context=f"clearing genres for movie id={movie_id}",
    )
    for genre_id in genre_ids:
        execute(
            conn,
            "INSERT INTO catalog.movie_genres (movie_id, genre_id) VALUES (%s, %s)",
            (int(movie_id), int(genre_id)),
            context=f"linking genre id={genre_id} to movie id={movie_id}",
        )


def list_movie_genre_ids(conn: Any, movie_id: int) -> list[int]:
    rows = fetch_all(
        conn,
        "SELECT genre_id FROM catalog.movie_genres WHERE movie_id = %s ORDER BY genre_id",
        (int(movie_id),),
        context=f"listing genres for movie id={movie_id}",
    )
    return [int(r["genre_id"]) for r in rows]
