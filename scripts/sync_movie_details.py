#!/usr/bin/env python3
"""
Sync full TMDb details (scalars, genres, top cast, YouTube videos) for tracked movies.

Usage:
    # One or more specific movies (source ids)
    PYTHONPATH=. python scripts/sync_movie_details.py --movie-id 1 --movie-id 862

    # Bulk, resumable: up to 1000 movies after id 5000, checkpoint every 50
    PYTHONPATH=. python scripts/sync_movie_details.py --start-after-id 5000 --max-movies 1000 --batch-size 50
"""
from __future__ import annotations

import argparse
import sys

from catalog_backend.ingestion.bulk_details import ItemStatus, run_bulk_details
from catalog_backend.ingestion.movie_details import import_movie_details

from scripts._sync_common import (
    add_common_args,
    configure_logging,
    install_interrupt_event,
    load_env_and_db,
    print_summary,
)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="sync_movie_details",
        description="Sync TMDb movie details for one movie or a resumable range of tracked movies.",
    )
    parser.add_argument("--movie-id", type=int, action="append", default=[], help="Source movie id. Repeatable.")
    parser.add_argument("--start-after-id", type=int, default=None, help="Resume cursor (exclusive).")
    parser.add_argument("--max-movies", type=int, default=1000, help="Cap on movies in a bulk run (default: 1000).")
    parser.add_argument("--batch-size", type=int, default=50, help="Checkpoint cadence (default: 50).")
    add_common_args(parser)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    configure_logging(args.verbose)
    conn = load_env_and_db(verbose=args.verbose)

    try:
        if args.movie_id:
            for movie_id in args.movie_id:
                outcome = import_movie_details(conn, movie_id)
                print(f"movie id={movie_id} outcome={outcome.value}")
            return 0

        result = run_bulk_details(
            conn,
            start_after_id=args.start_after_id,
            max_items=args.max_movies,
            batch_size=args.batch_size,
            cancel_event=install_interrupt_event(),
        )
    finally:
        conn.close()

    print_summary(
        "Bulk detail sync complete:",
        processed=result.processed,
        updated=result.count(ItemStatus.SUCCESS),
        skipped=result.count(ItemStatus.SKIPPED),
        failed=result.failed,
        last_id=result.last_id,
        cancelled=result.cancelled,
    )
    if result.last_id is not None:
        print(f"Resume with: --start-after-id {result.last_id}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
