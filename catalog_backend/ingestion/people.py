"""
On-demand completion of person rows (biography, birthday, place of birth).

Presence is the cache: a person whose optional fields are all filled is
never fetched again.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import requests

from catalog_backend.db.connection import transaction
from catalog_backend.ingestion.merge import merge_person_details
from catalog_backend.integrations.tmdb.client import try_fetch_person_details
from catalog_backend.repositories.people import find_person, list_people_missing_details, upsert_person

logger = logging.getLogger(__name__)

PERSON_DETAIL_FIELDS = ("biography", "birthday", "place_of_birth")


@dataclass(frozen=True)
class PeopleEnrichmentResult:
    processed: int = 0
    last_id: int | None = None


def person_needs_details(row: Mapping[str, Any] | None) -> bool:
    if row is None:
        return True
    for key in PERSON_DETAIL_FIELDS:
        value = row.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            return True
    return False


def enrich_person(
    conn: Any,
    person_id: int,
    *,
    api_key: str | None = None,
    session: requests.Session | None = None,
) -> dict[str, Any] | None:
    """
    Return the person row, fetching TMDb details first when fields are missing.

    When TMDb has no such person the local row (possibly None) is returned as is.
    """
    with transaction(conn):
        existing = find_person(conn, person_id)
    if not person_needs_details(existing):
        return existing

    details = try_fetch_person_details(person_id, api_key=api_key, session=session)
    if details is None:
        return existing

    with transaction(conn):
        current = find_person(conn, person_id)
        return upsert_person(conn, merge_person_details(current, details))


def enrich_people_missing_details(
    conn: Any,
    max_people: int = 200,
    *,
    start_after_id: int | None = None,
    api_key: str | None = None,
    session: requests.Session | None = None,
) -> PeopleEnrichmentResult:
    """
    Enrich up to `max_people` incomplete people in id order.

    People TMDb cannot complete stay incomplete, so pass the returned `last_id`
    as `start_after_id` to continue past them on the next run.
    """
    with transaction(conn):
        person_ids = list_people_missing_details(conn, limit=max_people, start_after_id=start_after_id)

    processed = 0
    last_id = start_after_id
    for person_id in person_ids:
        enrich_person(conn, person_id, api_key=api_key, session=session)
        processed += 1
        last_id = person_id

    logger.info("Enriched %d people (requested up to %d, last id %s)", processed, max_people, last_id)
    return PeopleEnrichmentResult(processed=processed, last_id=last_id)
