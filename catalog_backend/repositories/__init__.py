"""
Repository layer for DB access patterns.
"""

from catalog_backend.repositories.movies import find_movie, upsert_movie
from catalog_backend.repositories.people import find_person, upsert_person

__all__ = [
    "find_movie",
    "find_person",
    "upsert_movie",
    "upsert_person",
]
