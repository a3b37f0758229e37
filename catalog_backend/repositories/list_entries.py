from __future__ import annotations

from typing import Any

from catalog_backend.db.connection import execute


def upsert_list_entry(conn: Any, *, movie_id: int, list_type: str, page: int, position: int) -> None:
    """One row per (movie, list type); re-syncing overwrites page and position."""
    execute(
        conn,
        """
        INSERT INTO catalog.movie_list_entries (movie_id, list_type, page, position)
        VALUES (%s, %s, %s, %s)
        ON CONFLICT (movie_id, list_type) DO UPDATE SET page = EXCLUDED.page, position = EXCLUDED.position
        """,
        (int(movie_id), list_type, int(page), int(position)),
        context=f"upserting {list_type} entry for movie id={movie_id}",
    )
