from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from catalog_backend.db.connection import execute, fetch_all


def replace_movie_videos(conn: Any, movie_id: int, rows: Iterable[Mapping[str, Any]]) -> None:
    execute(
        conn,
        "DELETE FROM catalog.movie_videos WHERE movie_id = %s",
        (int(movie_id),),
        context=f"clearing videos for movie id={movie_id}",
    )
    for row in rows:
        execute(
            conn,
            "INSERT INTO catalog.movie_videos (movie_id, key, site, type, name) VALUES (%s, %s, %s, %s, %s)",
            (int(movie_id), row["key"], row["site"], row["type"], row["name"]),
            context=f"inserting video for movie id={movie_id}",
        )


def list_movie_videos(conn: Any, movie_id: int) -> list[dict[str, Any]]:
    return fetch_all(
        conn,
        "SELECT key, site, type, name FROM catalog.movie_videos WHERE movie_id = %s ORDER BY id",
        (int(movie_id),),
        context=f"listing videos for movie id={movie_id}",
    )
