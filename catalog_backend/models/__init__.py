"""
Domain models shared across scripts and services.
"""

from catalog_backend.models.movies import CatalogMovie
from catalog_backend.models.people import PersonRecord

__all__ = [
    "CatalogMovie",
    "PersonRecord",
]
