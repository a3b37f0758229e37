"""
Database preflight checks for the catalog importer.

Use these helpers to fail fast with clear errors when a job targets a
database that has not had the catalog migrations applied.
"""

from __future__ import annotations

from typing import Any

from catalog_backend.db.connection import DatabaseConnectionError, fetch_one

REQUIRED_TABLES = (
    "movies",
    "genres",
    "movie_genres",
    "people",
    "movie_cast",
    "movie_videos",
    "movie_list_entries",
    "movie_links",
    "tmdb_accounts",
)


def missing_catalog_tables(conn: Any, tables: tuple[str, ...] = REQUIRED_TABLES) -> list[str]:
    missing: list[str] = []
    for table in tables:
        row = fetch_one(
            conn,
            "SELECT to_regclass(%s) AS oid",
            (f"catalog.{table}",),
            context=f"preflight catalog.{table}",
        )
        if not row or row.get("oid") is None:
            missing.append(table)
    return missing


def assert_catalog_schema_exists(conn: Any) -> None:
    """
    Verify that the `catalog` tables used by the sync engine exist.

    Raises DatabaseConnectionError with actionable guidance if any are missing.
    """
    missing = missing_catalog_tables(conn)
    if not missing:
        return
    names = ", ".join(f"`catalog.{t}`" for t in missing)
    raise DatabaseConnectionError(
        f"Database preflight failed: {names} missing.\n"
        "This likely means you're connected to the wrong database or migrations were not applied.\n"
        "Run `psql \"$CATALOG_DB_URL\" -f migrations/0001_catalog_schema.sql`, then re-run the job."
    )
