#!/usr/bin/env python3
from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import Any

from catalog_backend.db.connection import connect, fetch_all, fetch_one, resolve_database_url
from catalog_backend.db.preflight import REQUIRED_TABLES
from catalog_backend.utils.env import load_env

REQUIRED_COLUMNS = {
    "movies": ["id", "tmdb_id", "title", "original_language", "runtime", "created_at", "updated_at"],
    "people": ["id", "name", "biography", "birthday", "place_of_birth"],
    "movie_videos": ["movie_id", "key", "site", "type", "name"],
    "movie_links": ["movie_id", "imdb_id", "tmdb_id"],
}

REQUIRED_PRIMARY_KEYS = {
    "movie_genres": ["movie_id", "genre_id"],
    "movie_cast": ["movie_id", "person_id", "cast_order"],
    "movie_list_entries": ["movie_id", "list_type"],
}


def _fetch_relkind(conn: Any, schema: str, name: str) -> str | None:
    row = fetch_one(
        conn,
        """
        select c.relkind
        from pg_class c
        join pg_namespace n on n.oid = c.relnamespace
        where n.nspname = %s and c.relname = %s
        """,
        (schema, name),
        context=f"relkind {schema}.{name}",
    )
    return row["relkind"] if row else None


def _fetch_columns(conn: Any, schema: str, table: str) -> set[str]:
    rows = fetch_all(
        conn,
        """
        select column_name
        from information_schema.columns
        where table_schema = %s and table_name = %s
        """,
        (schema, table),
        context=f"columns {schema}.{table}",
    )
    return {row["column_name"] for row in rows}


def _fetch_primary_key(conn: Any, schema: str, table: str) -> list[str]:
    rows = fetch_all(
        conn,
        """
        select kcu.column_name
        from information_schema.table_constraints tc
        join information_schema.key_column_usage kcu
          on tc.constraint_name = kcu.constraint_name
         and tc.table_schema = kcu.table_schema
        where tc.table_schema = %s
          and tc.table_name = %s
          and tc.constraint_type = 'PRIMARY KEY'
        order by kcu.ordinal_position
        """,
        (schema, table),
        context=f"primary key {schema}.{table}",
    )
    return [row["column_name"] for row in rows]


def _report(label: str, ok: bool, details: str | None = None) -> bool:
    status = "PASS" if ok else "FAIL"
    suffix = f" ({details})" if details else ""
    print(f"{status}: {label}{suffix}")
    return ok


def _check_table(conn: Any, table: str) -> bool:
    relkind = _fetch_relkind(conn, "catalog", table)
    if relkind is None:
        return _report(f"catalog.{table} table exists", False, "missing")
    return _report(f"catalog.{table} is a table", relkind in {"r", "p"}, f"relkind={relkind}")


def _check_columns(conn: Any, table: str, required: Iterable[str]) -> bool:
    existing = _fetch_columns(conn, "catalog", table)
    missing = [col for col in required if col not in existing]
    return _report(f"catalog.{table} columns", not missing, "missing=" + ",".join(missing) if missing else None)


def main(argv: list[str] | None = None) -> int:
    _ = argv
    load_env()

    conn = connect(resolve_database_url())
    try:
        ok = True
        for table in REQUIRED_TABLES:
            ok &= _check_table(conn, table)
        for table, columns in REQUIRED_COLUMNS.items():
            ok &= _check_columns(conn, table, columns)
        for table, expected in REQUIRED_PRIMARY_KEYS.items():
            pk = _fetch_primary_key(conn, "catalog", table)
            ok &= _report(f"catalog.{table} primary key", pk == expected, f"pk={pk}")
    finally:
        conn.close()

    print("Schema OK." if ok else "Schema check failed.")
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
