"""
Catalog Backend API - FastAPI application.

Provides endpoints for:
- Health checks
- Admin triggers for the TMDb import jobs (genres, lists, details, people,
  link import, gap backfill)
"""
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routers import admin_import
from catalog_backend.db.connection import DatabaseConnectionError, LocalStoreError
from catalog_backend.integrations.tmdb.records import TmdbClientError

logger = logging.getLogger(__name__)


def get_cors_origins() -> list[str]:
    """
    Get CORS allowed origins from environment.
    Set CORS_ALLOW_ORIGINS as comma-separated list of origins.
    Example: CORS_ALLOW_ORIGINS=https://admin.example.com,https://ops.example.com
    """
    origins_str = os.getenv("CORS_ALLOW_ORIGINS", "")
    if not origins_str:
        return []
    return [origin.strip() for origin in origins_str.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    logger.info("Starting up Catalog Backend API...")
    yield
    logger.info("Shutting down Catalog Backend API...")


app = FastAPI(
    title="Catalog Backend API",
    description="Movie catalog backend mirroring TMDb into a local Postgres schema",
    version="0.1.0",
    lifespan=lifespan,
)

# If no origins are configured, allow all origins but disable credentials
cors_origins = get_cors_origins()
allow_credentials = len(cors_origins) > 0

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins if cors_origins else ["*"],
    allow_credentials=allow_credentials,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.exception_handler(TmdbClientError)
async def tmdb_error_handler(request: Request, exc: TmdbClientError) -> JSONResponse:
    logger.error("TMDb error during %s %s: %s", request.method, request.url.path, exc)
    # Don't leak upstream response bodies to the client
    return JSONResponse(status_code=502, content={"detail": "TMDb request failed"})


@app.exception_handler(LocalStoreError)
async def store_error_handler(request: Request, exc: LocalStoreError) -> JSONResponse:
    logger.error("Catalog store error during %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Catalog database error"})


@app.exception_handler(DatabaseConnectionError)
async def connection_error_handler(request: Request, exc: DatabaseConnectionError) -> JSONResponse:
    logger.error("Catalog database unavailable: %s", exc)
    return JSONResponse(status_code=503, content={"detail": "Catalog database unavailable"})


app.include_router(admin_import.router, prefix="/api")


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "catalog-backend"}


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy"}
