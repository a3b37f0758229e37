"""
Resumable bulk detail sync over tracked movies, ordered by source id.

Each item goes through `import_movie_details`, which commits per movie. A
failing item is logged and recorded as FAILED; the run carries on with the
next id. Re-invoke with `start_after_id=result.last_id` to resume.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

import requests

from catalog_backend.db.connection import LocalStoreError, transaction
from catalog_backend.ingestion.movie_details import DetailOutcome, import_movie_details
from catalog_backend.repositories.movies import list_movie_ids_with_tmdb_mapping

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50


class CancelSignal(Protocol):
    def is_set(self) -> bool: ...


class ItemStatus(str, Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ItemOutcome:
    movie_id: int
    status: ItemStatus
    detail: str | None = None


@dataclass
class BatchRunResult:
    outcomes: list[ItemOutcome] = field(default_factory=list)
    cancelled: bool = False

    def count(self, status: ItemStatus) -> int:
        return sum(1 for o in self.outcomes if o.status is status)

    @property
    def processed(self) -> int:
        """Items that completed without raising (updated, or skipped as absent)."""
        return self.count(ItemStatus.SUCCESS) + self.count(ItemStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self.count(ItemStatus.FAILED)

    @property
    def last_id(self) -> int | None:
        return self.outcomes[-1].movie_id if self.outcomes else None


def _sync_one(conn: Any, movie_id: int, *, api_key: str | None, session: requests.Session | None) -> ItemOutcome:
    try:
        outcome = import_movie_details(conn, movie_id, api_key=api_key, session=session)
    except LocalStoreError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.warning("Detail sync failed for movie id=%s: %s", movie_id, exc)
        return ItemOutcome(movie_id, ItemStatus.FAILED, str(exc))

    if outcome is DetailOutcome.UPDATED:
        return ItemOutcome(movie_id, ItemStatus.SUCCESS)
    return ItemOutcome(movie_id, ItemStatus.SKIPPED, outcome.value)


def run_bulk_details(
    conn: Any,
    *,
    start_after_id: int | None = None,
    max_items: int = 1000,
    batch_size: int = DEFAULT_BATCH_SIZE,
    api_key: str | None = None,
    session: requests.Session | None = None,
    cancel_event: CancelSignal | None = None,
) -> BatchRunResult:
    """
    Sync details for up to `max_items` movies with a TMDb mapping, ids above `start_after_id`.

    The cancel signal is checked before every item; already committed movies stay.
    """
    result = BatchRunResult()
    if max_items <= 0:
        return result
    if batch_size <= 0:
        batch_size = DEFAULT_BATCH_SIZE

    with transaction(conn):
        movie_ids = list_movie_ids_with_tmdb_mapping(conn, start_after_id=start_after_id, limit=max_items)

    logger.info("Bulk detail sync: %d movies after id=%s", len(movie_ids), start_after_id)
    for index, movie_id in enumerate(movie_ids, start=1):
        if cancel_event is not None and cancel_event.is_set():
            logger.info("Bulk detail sync cancelled after id=%s", result.last_id)
            result.cancelled = True
            break

        result.outcomes.append(_sync_one(conn, movie_id, api_key=api_key, session=session))

        if index % batch_size == 0:
            logger.info(
                "Checkpoint: %d/%d movies, %d failed, last id=%s",
                index,
                len(movie_ids),
                result.failed,
                movie_id,
            )

    logger.info(
        "Bulk detail sync done: processed=%d failed=%d last id=%s",
        result.processed,
        result.failed,
        result.last_id,
    )
    return result
