#!/usr/bin/env python3
"""
Create or refresh catalog.movies rows for every link that carries a TMDb id.

Usage:
    PYTHONPATH=. python scripts/import_movies_from_links.py --batch-size 200
    PYTHONPATH=. python scripts/import_movies_from_links.py --start-after-id 1200 --max-movies 500
"""
from __future__ import annotations

import argparse
import sys

from catalog_backend.ingestion.links_import import import_movies_from_links

from scripts._sync_common import (
    add_common_args,
    configure_logging,
    install_interrupt_event,
    load_env_and_db,
    print_summary,
)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="import_movies_from_links",
        description="Import movies listed in catalog.movie_links from TMDb.",
    )
    parser.add_argument("--start-after-id", type=int, default=None, help="Resume cursor (exclusive).")
    parser.add_argument("--max-movies", type=int, default=None, help="Optional cap on links processed.")
    parser.add_argument("--batch-size", type=int, default=200, help="Commit every N links (default: 200).")
    add_common_args(parser)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    configure_logging(args.verbose)
    conn = load_env_and_db(verbose=args.verbose)
    try:
        result = import_movies_from_links(
            conn,
            start_after_id=args.start_after_id,
            max_movies=args.max_movies,
            batch_size=args.batch_size,
            cancel_event=install_interrupt_event(),
        )
    finally:
        conn.close()

    print_summary(
        "Links import complete:",
        imported=result.imported,
        skipped=result.skipped,
        failed=result.failed,
        last_id=result.last_id,
        cancelled=result.cancelled,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
