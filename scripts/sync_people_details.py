#!/usr/bin/env python3
"""
Fill in biography, birthday and place of birth for people from TMDb.

People that already have all three are never fetched.

Usage:
    PYTHONPATH=. python scripts/sync_people_details.py --person-id 287
    PYTHONPATH=. python scripts/sync_people_details.py --max 200
"""
from __future__ import annotations

import argparse
import sys

from catalog_backend.ingestion.people import enrich_people_missing_details, enrich_person

from scripts._sync_common import add_common_args, configure_logging, load_env_and_db, print_summary


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="sync_people_details", description="Enrich catalog.people from TMDb.")
    parser.add_argument("--person-id", type=int, action="append", default=[], help="TMDb person id. Repeatable.")
    parser.add_argument("--max", type=int, default=200, help="Cap on people in a bulk run (default: 200).")
    parser.add_argument("--start-after-id", type=int, default=None, help="Only people with a larger id.")
    add_common_args(parser)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    configure_logging(args.verbose)
    conn = load_env_and_db(verbose=args.verbose)
    try:
        if args.person_id:
            for person_id in args.person_id:
                person = enrich_person(conn, person_id)
                print(f"person id={person_id} {'name=' + person['name'] if person else 'not found'}")
            return 0
        result = enrich_people_missing_details(conn, args.max, start_after_id=args.start_after_id)
    finally:
        conn.close()

    print_summary("People enrichment complete:", processed=result.processed, last_id=result.last_id)
    if result.processed and result.last_id is not None:
        print(f"Resume with: --start-after-id {result.last_id}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
