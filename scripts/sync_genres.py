#!/usr/bin/env python3
"""
Sync TMDb's movie genre list into catalog.genres.

Usage:
    PYTHONPATH=. python scripts/sync_genres.py
"""
from __future__ import annotations

import argparse
import sys

from catalog_backend.ingestion.genres import sync_genres

from scripts._sync_common import add_common_args, configure_logging, load_env_and_db, print_summary


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="sync_genres", description="Sync TMDb movie genres into catalog.genres.")
    add_common_args(parser)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    configure_logging(args.verbose)
    conn = load_env_and_db(verbose=args.verbose)
    try:
        synced = sync_genres(conn)
    finally:
        conn.close()
    print_summary("Genre sync complete:", synced=synced)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
