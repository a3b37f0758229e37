from __future__ import annotations

from typing import Any

from catalog_backend.db.connection import LocalStoreError, fetch_all, fetch_one
from catalog_backend.models.people import PersonRecord


def find_person(conn: Any, person_id: int) -> dict[str, Any] | None:
    return fetch_one(
        conn,
        "SELECT * FROM catalog.people WHERE id = %s",
        (int(person_id),),
        context=f"finding person id={person_id}",
    )


def upsert_person(conn: Any, person: PersonRecord) -> dict[str, Any]:
    result = fetch_one(
        conn,
        """
        INSERT INTO catalog.people (id, name, profile_path, biography, birthday, place_of_birth)
        VALUES (%(id)s, %(name)s, %(profile_path)s, %(biography)s, %(birthday)s, %(place_of_birth)s)
        ON CONFLICT (id) DO UPDATE SET
            name = EXCLUDED.name,
            profile_path = EXCLUDED.profile_path,
            biography = EXCLUDED.biography,
            birthday = EXCLUDED.birthday,
            place_of_birth = EXCLUDED.place_of_birth
        RETURNING *
        """,
        person.to_row(),
        context=f"upserting person id={person.id}",
    )
    if result is None:
        raise LocalStoreError(f"Upsert returned no data for person id={person.id}.")
    return result


def list_people_missing_details(conn: Any, *, limit: int, start_after_id: int | None = None) -> list[int]:
    """Ids of people missing any of biography, birthday or place of birth, ascending."""
    rows = fetch_all(
        conn,
        """
        SELECT id FROM catalog.people
        WHERE (biography IS NULL OR birthday IS NULL OR place_of_birth IS NULL)
          AND (%(after)s::integer IS NULL OR id > %(after)s::integer)
        ORDER BY id
        LIMIT %(limit)s
        """,
        {"after": start_after_id, "limit": max(0, int(limit))},
        context="listing people missing details",
    )
    return [int(r["id"]) for r in rows]
