"""
Catalog sync jobs: each takes an open connection and pulls data from TMDb
into the `catalog` schema.
"""

from catalog_backend.ingestion.bulk_details import BatchRunResult, ItemStatus, run_bulk_details
from catalog_backend.ingestion.gap_backfill import BackfillResult, backfill_missing_movies
from catalog_backend.ingestion.list_import import ListImportResult, import_movie_list
from catalog_backend.ingestion.movie_details import DetailOutcome, import_movie_details
from catalog_backend.ingestion.people import PeopleEnrichmentResult, enrich_people_missing_details, enrich_person

__all__ = [
    "BackfillResult",
    "BatchRunResult",
    "DetailOutcome",
    "ItemStatus",
    "ListImportResult",
    "PeopleEnrichmentResult",
    "backfill_missing_movies",
    "enrich_people_missing_details",
    "enrich_person",
    "import_movie_details",
    "import_movie_list",
    "run_bulk_details",
]
