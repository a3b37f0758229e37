"""Read-through access to account-scoped TMDb lists (favorites, watchlist, rated)."""
from __future__ import annotations

from typing import Any

import requests

from catalog_backend.db.connection import transaction
from catalog_backend.integrations.tmdb.client import fetch_account_movie_list
from catalog_backend.integrations.tmdb.records import TmdbMovieListPage
from catalog_backend.repositories.tmdb_accounts import find_account_session_id


def get_account_movie_list(
    conn: Any,
    account_id: int,
    list_name: str,
    *,
    session_id: str | None = None,
    page: int = 1,
    api_key: str | None = None,
    session: requests.Session | None = None,
) -> TmdbMovieListPage:
    """
    Fetch one page of an account list such as `favorite/movies`.

    Without an explicit `session_id` the session stored for the account is
    used. Nothing is written locally.
    """
    list_name = str(list_name or "").strip().strip("/")
    if not list_name:
        raise ValueError("list_name is required")

    session_id = (session_id or "").strip() or None
    if session_id is None:
        with transaction(conn):
            session_id = find_account_session_id(conn, account_id)
    if not session_id:
        raise ValueError(f"No TMDb session stored for account id={account_id}")

    return fetch_account_movie_list(
        account_id,
        list_name,
        session_id=session_id,
        page=max(1, int(page)),
        api_key=api_key,
        session=session,
    )
