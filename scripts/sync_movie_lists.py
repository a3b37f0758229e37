#!/usr/bin/env python3
"""
Import TMDb ranked lists (popular, top_rated, upcoming, now_playing).

Usage:
    # First page of the popular list
    PYTHONPATH=. python scripts/sync_movie_lists.py --list-type popular

    # Three pages each of two lists
    PYTHONPATH=. python scripts/sync_movie_lists.py --list-type popular --list-type top_rated --pages 3
"""
from __future__ import annotations

import argparse
import sys

from catalog_backend.ingestion.list_import import KNOWN_LIST_TYPES, import_movie_list
from catalog_backend.integrations.tmdb.records import TmdbClientError

from scripts._sync_common import add_common_args, configure_logging, load_env_and_db, print_summary


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="sync_movie_lists",
        description="Import TMDb ranked movie lists page by page into catalog.movies.",
    )
    parser.add_argument(
        "--list-type",
        action="append",
        default=[],
        help=f"TMDb list type. Repeatable. Known: {', '.join(KNOWN_LIST_TYPES)} (default: popular).",
    )
    parser.add_argument("--pages", type=int, default=1, help="Pages to import per list (default: 1).")
    add_common_args(parser)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    configure_logging(args.verbose)
    list_types = [t.strip() for t in args.list_type if t.strip()] or ["popular"]

    conn = load_env_and_db(verbose=args.verbose)
    failures: list[str] = []
    total_movies = 0
    try:
        for list_type in list_types:
            try:
                result = import_movie_list(conn, list_type, args.pages)
            except TmdbClientError as exc:
                failures.append(f"{list_type}: {exc}")
                print(f"FAILED list={list_type}: {exc}", file=sys.stderr)
                continue
            total_movies += result.movies
            print(f"OK list={result.list_type} pages={result.pages} movies={result.movies}")
    finally:
        conn.close()

    print_summary("List import complete:", lists=len(list_types), movies=total_movies, failures=len(failures))
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
