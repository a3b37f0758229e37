#!/usr/bin/env python3
"""
Import linked movies that have a TMDb id but no catalog.movies row yet.

Usage:
    PYTHONPATH=. python scripts/backfill_missing_movies.py --max-movies 1000 --batch-size 200
"""
from __future__ import annotations

import argparse
import sys

from catalog_backend.ingestion.gap_backfill import backfill_missing_movies

from scripts._sync_common import (
    add_common_args,
    configure_logging,
    install_interrupt_event,
    load_env_and_db,
    print_summary,
)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="backfill_missing_movies",
        description="Backfill catalog.movies from catalog.movie_links gaps.",
    )
    parser.add_argument("--max-movies", type=int, default=1000, help="Cap on gaps imported (default: 1000).")
    parser.add_argument("--batch-size", type=int, default=200, help="Commit every N gaps (default: 200).")
    add_common_args(parser)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    configure_logging(args.verbose)
    conn = load_env_and_db(verbose=args.verbose)
    try:
        result = backfill_missing_movies(
            conn,
            max_movies=args.max_movies,
            batch_size=args.batch_size,
            cancel_event=install_interrupt_event(),
        )
    finally:
        conn.close()

    print_summary(
        "Gap backfill complete:",
        imported=result.imported,
        skipped=result.skipped,
        failed=result.failed,
        last_id=result.last_id,
        cancelled=result.cancelled,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
