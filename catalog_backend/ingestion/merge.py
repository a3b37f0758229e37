"""
Field-level merge of TMDb records onto local rows.

Every field follows the same rule: take the incoming value when it is present
and non-empty, otherwise keep what is stored, otherwise fall back to a fixed
default. These are pure functions; callers own the reads and writes.
"""
from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, TypeVar

from catalog_backend.integrations.tmdb.records import (
    TmdbCastMember,
    TmdbMovieDetails,
    TmdbMovieSummary,
    TmdbPersonDetails,
)
from catalog_backend.models.movies import UNKNOWN_LANGUAGE, UNKNOWN_TITLE, CatalogMovie
from catalog_backend.models.people import UNKNOWN_PERSON, PersonRecord

_VOTE_AVERAGE_QUANTUM = Decimal("0.01")

T = TypeVar("T")


def _now_utc() -> datetime:
    return datetime.now(UTC)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def prefer(incoming: T | None, existing: T | None, default: T | None = None) -> T | None:
    """Incoming if present and non-empty, else existing if present, else `default`."""
    if not _is_missing(incoming):
        return incoming
    if not _is_missing(existing):
        return existing
    return default


def parse_date(value: Any) -> date | None:
    """Parse `YYYY-MM-DD` (a trailing time part is ignored); None when unparseable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        return None


def coerce_vote_average(value: float | Decimal | None) -> Decimal | None:
    """TMDb sends floats; the store keeps two decimal places."""
    if value is None:
        return None
    return Decimal(str(value)).quantize(_VOTE_AVERAGE_QUANTUM, rounding=ROUND_HALF_UP)


def _existing_movie(existing: CatalogMovie | Mapping[str, Any] | None) -> CatalogMovie | None:
    if existing is None or isinstance(existing, CatalogMovie):
        return existing
    return CatalogMovie.from_row(existing)


def merge_movie(
    existing: CatalogMovie | Mapping[str, Any] | None,
    incoming: TmdbMovieSummary,
    *,
    movie_id: int | None = None,
    tmdb_id: int | None = None,
    now: datetime | None = None,
) -> CatalogMovie:
    """
    Reconcile an incoming TMDb movie with the stored row (if any).

    `movie_id` is the source-system id to key the row by; it defaults to the
    existing row's id, then to the incoming TMDb id. `tmdb_id` is stamped when
    given, otherwise the stored value is kept. Runtime only changes when the
    incoming record is a detail payload that carries one.
    """
    current = _existing_movie(existing)
    now = now or _now_utc()

    if movie_id is None:
        movie_id = current.id if current is not None else incoming.id

    title = prefer(incoming.title, incoming.original_title)
    title = prefer(title, current.title if current else None, UNKNOWN_TITLE)

    language = prefer(
        incoming.original_language,
        current.original_language if current else None,
        UNKNOWN_LANGUAGE,
    )

    release_date = parse_date(incoming.release_date)
    if release_date is None and current is not None:
        release_date = current.release_date

    runtime = current.runtime if current is not None else None
    if isinstance(incoming, TmdbMovieDetails) and incoming.runtime is not None:
        runtime = incoming.runtime

    vote_average = coerce_vote_average(incoming.vote_average)

    return CatalogMovie(
        id=int(movie_id),
        tmdb_id=tmdb_id if tmdb_id is not None else (current.tmdb_id if current else None),
        title=title,
        overview=prefer(incoming.overview, current.overview if current else None),
        poster_path=prefer(incoming.poster_path, current.poster_path if current else None),
        backdrop_path=prefer(incoming.backdrop_path, current.backdrop_path if current else None),
        release_date=release_date,
        popularity=prefer(incoming.popularity, current.popularity if current else None, 0.0),
        vote_average=prefer(vote_average, current.vote_average if current else None, Decimal("0.00")),
        vote_count=prefer(incoming.vote_count, current.vote_count if current else None, 0),
        original_language=language,
        runtime=runtime,
        created_at=current.created_at if current is not None and current.created_at else now,
        updated_at=now,
    )


def _existing_person(existing: PersonRecord | Mapping[str, Any] | None) -> PersonRecord | None:
    if existing is None or isinstance(existing, PersonRecord):
        return existing
    return PersonRecord.from_row(existing)


def merge_credit_person(
    existing: PersonRecord | Mapping[str, Any] | None,
    member: TmdbCastMember,
) -> PersonRecord:
    """A cast credit only carries name and profile image; other fields are kept."""
    current = _existing_person(existing)
    if current is None:
        return PersonRecord(
            id=member.id,
            name=prefer(member.name, None, UNKNOWN_PERSON),
            profile_path=member.profile_path,
        )
    return PersonRecord(
        id=current.id,
        name=prefer(member.name, current.name, UNKNOWN_PERSON),
        profile_path=prefer(member.profile_path, current.profile_path),
        biography=current.biography,
        birthday=current.birthday,
        place_of_birth=current.place_of_birth,
    )


def merge_person_details(
    existing: PersonRecord | Mapping[str, Any] | None,
    details: TmdbPersonDetails,
) -> PersonRecord:
    current = _existing_person(existing)
    birthday = parse_date(details.birthday)
    if birthday is None and current is not None:
        birthday = current.birthday
    return PersonRecord(
        id=current.id if current is not None else details.id,
        name=prefer(details.name, current.name if current else None, UNKNOWN_PERSON),
        profile_path=prefer(details.profile_path, current.profile_path if current else None),
        biography=prefer(details.biography, current.biography if current else None),
        birthday=birthday,
        place_of_birth=prefer(details.place_of_birth, current.place_of_birth if current else None),
    )
