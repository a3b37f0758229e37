from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from catalog_backend.db.connection import execute, fetch_all


def replace_movie_cast(conn: Any, movie_id: int, rows: Iterable[Mapping[str, Any]]) -> None:
    """Delete every credit of the movie, then insert `rows` (person_id, cast_order, character)."""
    execute(
        conn,
        "DELETE FROM catalog.movie_cast WHERE movie_id = %s",
        (int(movie_id),),
        context=f"clearing cast for movie id={movie_id}",
    )
    for row in rows:
        execute(
            conn,
            "INSERT INTO catalog.movie_cast (movie_id, person_id, cast_order, character) VALUES (%s, %s, %s, %s)",
            (int(movie_id), int(row["person_id"]), int(row["cast_order"]), row.get("character")),
            context=f"inserting cast person id={row['person_id']} for movie id={movie_id}",
        )


def list_movie_cast(conn: Any, movie_id: int) -> list[dict[str, Any]]:
    return fetch_all(
        conn,
        "SELECT person_id, cast_order, character FROM catalog.movie_cast WHERE movie_id = %s ORDER BY cast_order",
        (int(movie_id),),
        context=f"listing cast for movie id={movie_id}",
    )
