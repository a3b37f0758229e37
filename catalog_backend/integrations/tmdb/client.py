from __future__ import annotations

import logging
import os
import random
import re
import time
from collections.abc import Callable
from typing import Any, TypeVar

import requests

from catalog_backend.integrations.tmdb.records import (
    DeserializationError,
    TmdbClientError,
    TmdbGenre,
    TmdbMovieDetails,
    TmdbMovieListPage,
    TmdbPersonDetails,
    parse_genre_list,
)
from catalog_backend.utils.env import env_float

logger = logging.getLogger(__name__)

TMDB_API_BASE_URL = "https://api.themoviedb.org/3"
DETAIL_APPEND_TO_RESPONSE = "videos,credits"
MAX_ATTEMPTS = 3

_API_KEY_RE = re.compile(r"(api_key=)[^&]*")
LIST_TYPE_PATTERN = r"^[a-z_]+$"
_LIST_TYPE_RE = re.compile(LIST_TYPE_PATTERN)

T = TypeVar("T")


class ProviderError(TmdbClientError):
    """Non-2xx, non-404 response from TMDb."""

    def __init__(self, message: str, *, url: str, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(f"{message}\nURL: {url}\nStatus: {status_code}\nBody: {body or ''}")
        self.url = url
        self.status_code = status_code
        self.body = body


class ProviderNotFound(TmdbClientError):
    """TMDb answered 404: the record does not exist upstream (or was deleted)."""

    def __init__(self, url: str) -> None:
        super().__init__(f"TMDb record not found: {url}")
        self.url = url


def _require_api_key(api_key: str | None) -> str:
    resolved = (api_key or os.getenv("TMDB_API_KEY") or "").strip()
    if not resolved:
        raise RuntimeError("TMDB_API_KEY is not set.")
    return resolved


def resolve_base_url(base_url: str | None = None) -> str:
    resolved = (base_url or os.getenv("TMDB_API_BASE_URL") or "").strip()
    return (resolved or TMDB_API_BASE_URL).rstrip("/")


def build_request_url(path_with_query: str, *, api_key: str, base_url: str | None = None) -> str:
    """
    Join base URL and path, appending the credential as `api_key`.

    Uses `&` when the path already carries a query string, `?` otherwise.
    """
    path = path_with_query if path_with_query.startswith("/") else f"/{path_with_query}"
    separator = "&" if "?" in path else "?"
    return f"{resolve_base_url(base_url)}{path}{separator}api_key={api_key}"


def redact_api_key(url: str) -> str:
    return _API_KEY_RE.sub(r"\1***", url)


def _sleep_before_retry(attempt: int, *, retry_after: str | None = None) -> None:
    delay = 1.0 * (2**attempt)
    retry_after = (retry_after or "").strip()
    if retry_after.isdigit():
        delay = max(delay, float(retry_after))
    jitter = random.uniform(0.0, delay * 0.25)
    time.sleep(delay + jitter)


def _get(session: requests.Session, url: str, *, timeout_seconds: float) -> requests.Response:
    headers = {"accept": "application/json"}
    safe_url = redact_api_key(url)

    for attempt in range(MAX_ATTEMPTS):
        try:
            resp = session.get(url, headers=headers, timeout=timeout_seconds)
        except requests.RequestException as exc:
            if attempt < MAX_ATTEMPTS - 1:
                logger.debug("TMDb transport error on %s (attempt %d): %s", safe_url, attempt + 1, exc)
                _sleep_before_retry(attempt)
                continue
            raise ProviderError(f"TMDb request failed: {exc}", url=safe_url) from exc

        retryable = resp.status_code == 429 or 500 <= resp.status_code < 600
        if retryable and attempt < MAX_ATTEMPTS - 1:
            logger.debug("TMDb HTTP %d on %s (attempt %d), retrying", resp.status_code, safe_url, attempt + 1)
            _sleep_before_retry(attempt, retry_after=resp.headers.get("Retry-After"))
            continue
        return resp

    raise ProviderError("TMDb request failed (no response).", url=safe_url)


def fetch_json(
    path_with_query: str,
    *,
    api_key: str | None = None,
    session: requests.Session | None = None,
    base_url: str | None = None,
    timeout_seconds: float | None = None,
) -> Any:
    """
    GET a TMDb path and return the decoded JSON body.

    Raises:
        ProviderNotFound: on HTTP 404.
        ProviderError: on any other non-2xx status (after retries for 429/5xx).
        DeserializationError: when the body is not valid JSON.
    """
    url = build_request_url(path_with_query, api_key=_require_api_key(api_key), base_url=base_url)
    session = session or requests.Session()
    timeout = timeout_seconds if timeout_seconds is not None else env_float("TMDB_TIMEOUT_SECONDS", 20.0)

    resp = _get(session, url, timeout_seconds=timeout)
    if resp.status_code == 404:
        raise ProviderNotFound(redact_api_key(url))
    if not 200 <= resp.status_code < 300:
        raise ProviderError(
            "TMDb call failed.",
            url=redact_api_key(url),
            status_code=resp.status_code,
            body=(resp.text or "")[:2000],
        )

    try:
        return resp.json()
    except ValueError as exc:
        raise DeserializationError("TMDb returned non-JSON response", path=path_with_query) from exc


def fetch(path_with_query: str, parse: Callable[..., T], **kwargs: Any) -> T:
    """Fetch a path and parse it with `parse(payload, path=...)`."""
    payload = fetch_json(path_with_query, **kwargs)
    return parse(payload, path=path_with_query)


def try_fetch(path_with_query: str, parse: Callable[..., T], **kwargs: Any) -> T | None:
    """Like `fetch`, but returns None when TMDb answers 404."""
    try:
        return fetch(path_with_query, parse, **kwargs)
    except ProviderNotFound:
        return None


def fetch_genres(**kwargs: Any) -> list[TmdbGenre]:
    return fetch("/genre/movie/list", parse_genre_list, **kwargs)


def fetch_movie_list_page(list_type: str, page: int, **kwargs: Any) -> TmdbMovieListPage:
    """Fetch one page of a ranked list such as `popular`, `top_rated` or `upcoming`."""
    list_type = str(list_type or "").strip()
    if not list_type:
        raise ValueError("list_type is required")
    if not _LIST_TYPE_RE.match(list_type):
        raise ValueError(f"Invalid TMDb list type: {list_type!r}")
    return fetch(f"/movie/{list_type}?page={int(page)}", TmdbMovieListPage.from_payload, **kwargs)


def try_fetch_movie_details(
    tmdb_id: int,
    *,
    include_nested: bool = True,
    **kwargs: Any,
) -> TmdbMovieDetails | None:
    """
    Fetch `/movie/{id}`; with `include_nested` the videos and credits are appended.

    Returns None when the movie does not exist on TMDb.
    """
    path = f"/movie/{int(tmdb_id)}"
    if include_nested:
        path = f"{path}?append_to_response={DETAIL_APPEND_TO_RESPONSE}"
    return try_fetch(path, TmdbMovieDetails.from_payload, **kwargs)


def try_fetch_person_details(person_id: int, **kwargs: Any) -> TmdbPersonDetails | None:
    return try_fetch(f"/person/{int(person_id)}", TmdbPersonDetails.from_payload, **kwargs)


def fetch_account_movie_list(
    account_id: int,
    list_name: str,
    *,
    session_id: str,
    page: int = 1,
    **kwargs: Any,
) -> TmdbMovieListPage:
    """Fetch an account-scoped list, e.g. `favorite/movies` or `watchlist/movies`."""
    list_name = str(list_name or "").strip().strip("/")
    if not list_name:
        raise ValueError("list_name is required")
    path = f"/account/{int(account_id)}/{list_name}?session_id={session_id}&page={max(1, int(page))}"
    return fetch(path, TmdbMovieListPage.from_payload, **kwargs)

