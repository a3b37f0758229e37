from __future__ import annotations

import argparse
import logging
import signal
import threading
from typing import Any

from catalog_backend.db.connection import connect, mask_database_url, resolve_database_url
from catalog_backend.db.preflight import assert_catalog_schema_exists
from catalog_backend.utils.env import load_env


def add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def load_env_and_db(*, verbose: bool = False) -> Any:
    load_env()
    url = resolve_database_url()
    if verbose:
        print(f"Connecting to {mask_database_url(url)}")
    conn = connect(url)
    assert_catalog_schema_exists(conn)
    return conn


def install_interrupt_event() -> threading.Event:
    """
    Return an event that is set on the first Ctrl-C.

    Bulk jobs check it between items and stop cleanly; a second Ctrl-C
    falls back to the default KeyboardInterrupt.
    """
    event = threading.Event()

    def _handler(signum, frame):
        if event.is_set():
            signal.default_int_handler(signum, frame)
        print("Interrupt received; stopping after the current item (Ctrl-C again to abort).")
        event.set()

    signal.signal(signal.SIGINT, _handler)
    return event


def print_summary(title: str, **fields: Any) -> None:
    print(title)
    for key, value in fields.items():
        print(f"  {key}={value}")
