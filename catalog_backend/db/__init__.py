"""
Database helpers for catalog scripts/services.
"""

from catalog_backend.db.connection import (
    DatabaseConnectionError,
    LocalStoreError,
    connect,
    savepoint,
    transaction,
)

__all__ = [
    "DatabaseConnectionError",
    "LocalStoreError",
    "connect",
    "savepoint",
    "transaction",
]
