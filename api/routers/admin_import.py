"""
Administrative triggers for the TMDb import jobs.

Every route requires the X-Admin-Token header. Jobs run synchronously in the
request; bulk jobs return counts plus the last id so callers can resume.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, Path, Query
from pydantic import BaseModel

from api.auth import AdminToken
from api.deps import CatalogDb, TmdbApiKey
from catalog_backend.ingestion.account_lists import get_account_movie_list
from catalog_backend.ingestion.bulk_details import ItemStatus, run_bulk_details
from catalog_backend.ingestion.gap_backfill import backfill_missing_movies
from catalog_backend.ingestion.genres import sync_genres
from catalog_backend.ingestion.links_import import import_movies_from_links
from catalog_backend.ingestion.list_import import import_movie_list
from catalog_backend.ingestion.movie_details import import_movie_details
from catalog_backend.ingestion.people import enrich_people_missing_details, enrich_person
from catalog_backend.integrations.tmdb.client import LIST_TYPE_PATTERN

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/tmdb-import", tags=["admin"])


# --- Pydantic models ---


class GenreSyncResponse(BaseModel):
    synced: int


class MovieDetailResponse(BaseModel):
    movie_id: int
    outcome: str


class BulkDetailsResponse(BaseModel):
    processed: int
    updated: int
    skipped: int
    failed: int
    last_id: int | None
    cancelled: bool


class ListImportResponse(BaseModel):
    list_type: str
    pages: int
    movies: int


class Person(BaseModel):
    id: int
    name: str
    profile_path: str | None = None
    biography: str | None = None
    birthday: date | None = None
    place_of_birth: str | None = None


class PeopleDetailsResponse(BaseModel):
    processed: int
    last_id: int | None


class LinksImportResponse(BaseModel):
    processed: int
    skipped: int
    failed: int
    last_id: int | None
    cancelled: bool


class BackfillResponse(BaseModel):
    imported: int
    skipped: int
    failed: int
    last_id: int | None
    cancelled: bool


class AccountMovie(BaseModel):
    id: int
    title: str | None
    release_date: str | None
    poster_path: str | None


class AccountListResponse(BaseModel):
    page: int
    total_pages: int
    total_results: int
    results: list[AccountMovie] = []


# --- Routes ---


@router.post("/genres", response_model=GenreSyncResponse)
def trigger_genre_sync(_: AdminToken, db: CatalogDb, api_key: TmdbApiKey) -> dict:
    return {"synced": sync_genres(db, api_key=api_key)}


@router.post("/movies/details-bulk", response_model=BulkDetailsResponse)
def trigger_bulk_details(
    _: AdminToken,
    db: CatalogDb,
    api_key: TmdbApiKey,
    start_after_id: int | None = Query(default=None),
    max_movies: int = Query(default=1000, ge=0),
    batch_size: int = Query(default=50, ge=1),
) -> dict:
    """Sync details for tracked movies after `start_after_id`; resume with the returned `last_id`."""
    logger.info("Bulk detail sync requested: after=%s max=%d batch=%d", start_after_id, max_movies, batch_size)
    result = run_bulk_details(
        db,
        start_after_id=start_after_id,
        max_items=max_movies,
        batch_size=batch_size,
        api_key=api_key,
    )
    return {
        "processed": result.processed,
        "updated": result.count(ItemStatus.SUCCESS),
        "skipped": result.count(ItemStatus.SKIPPED),
        "failed": result.failed,
        "last_id": result.last_id,
        "cancelled": result.cancelled,
    }


@router.post("/movies/{movie_id}", response_model=MovieDetailResponse)
def trigger_movie_details(_: AdminToken, db: CatalogDb, api_key: TmdbApiKey, movie_id: int) -> dict:
    outcome = import_movie_details(db, movie_id, api_key=api_key)
    return {"movie_id": movie_id, "outcome": outcome.value}


@router.post("/lists/{list_type}", response_model=ListImportResponse)
def trigger_list_import(
    _: AdminToken,
    db: CatalogDb,
    api_key: TmdbApiKey,
    list_type: str = Path(pattern=LIST_TYPE_PATTERN),
    pages: int = Query(default=1, ge=1, le=500),
) -> dict:
    result = import_movie_list(db, list_type, pages, api_key=api_key)
    return {"list_type": result.list_type, "pages": result.pages, "movies": result.movies}


@router.post("/people/{person_id}", response_model=Person)
def trigger_person_enrichment(_: AdminToken, db: CatalogDb, api_key: TmdbApiKey, person_id: int) -> dict:
    person = enrich_person(db, person_id, api_key=api_key)
    if person is None:
        raise HTTPException(status_code=404, detail="Person not found")
    return person


@router.post("/people-details", response_model=PeopleDetailsResponse)
def trigger_people_details(
    _: AdminToken,
    db: CatalogDb,
    api_key: TmdbApiKey,
    max_people: int = Query(default=200, ge=0, alias="max"),
    start_after_id: int | None = Query(default=None),
) -> dict:
    result = enrich_people_missing_details(db, max_people, start_after_id=start_after_id, api_key=api_key)
    return {"processed": result.processed, "last_id": result.last_id}


@router.post("/sync-from-links", response_model=LinksImportResponse)
def trigger_links_import(
    _: AdminToken,
    db: CatalogDb,
    api_key: TmdbApiKey,
    start_after_id: int | None = Query(default=None),
    max_movies: int | None = Query(default=None, ge=0),
    batch_size: int = Query(default=200, ge=1),
) -> dict:
    logger.info("Links import requested: after=%s max=%s batch=%d", start_after_id, max_movies, batch_size)
    result = import_movies_from_links(
        db,
        start_after_id=start_after_id,
        max_movies=max_movies,
        batch_size=batch_size,
        api_key=api_key,
    )
    return {
        "processed": result.imported,
        "skipped": result.skipped,
        "failed": result.failed,
        "last_id": result.last_id,
        "cancelled": result.cancelled,
    }


@router.post("/backfill-missing", response_model=BackfillResponse)
def trigger_backfill(
    _: AdminToken,
    db: CatalogDb,
    api_key: TmdbApiKey,
    max_movies: int = Query(default=1000, ge=0),
    batch_size: int = Query(default=200, ge=1),
) -> dict:
    logger.info("Gap backfill requested: max=%d batch=%d", max_movies, batch_size)
    result = backfill_missing_movies(db, max_movies=max_movies, batch_size=batch_size, api_key=api_key)
    return {
        "imported": result.imported,
        "skipped": result.skipped,
        "failed": result.failed,
        "last_id": result.last_id,
        "cancelled": result.cancelled,
    }


@router.get("/accounts/{account_id}/lists/{list_name:path}", response_model=AccountListResponse)
def read_account_list(
    _: AdminToken,
    db: CatalogDb,
    api_key: TmdbApiKey,
    account_id: int,
    list_name: str,
    page: int = Query(default=1),
) -> dict[str, Any]:
    """Proxy an account list (e.g. `favorite/movies`) using the account's stored session."""
    try:
        listing = get_account_movie_list(db, account_id, list_name, page=page, api_key=api_key)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {
        "page": listing.page,
        "total_pages": listing.total_pages,
        "total_results": listing.total_results,
        "results": [
            {"id": m.id, "title": m.title, "release_date": m.release_date, "poster_path": m.poster_path}
            for m in listing.results
        ],
    }
