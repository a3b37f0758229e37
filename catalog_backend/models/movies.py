from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any

UNKNOWN_TITLE = "(unknown title)"
UNKNOWN_LANGUAGE = "unknown"


@dataclass(frozen=True)
class CatalogMovie:
    """
    Canonical movie row (maps to `catalog.movies`).

    `id` is the source-system id; `tmdb_id` is TMDb's id for the same movie
    and may be absent until a sync stamps it.
    """

    id: int
    title: str
    tmdb_id: int | None = None
    overview: str | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None
    release_date: date | None = None
    popularity: float = 0.0
    vote_average: Decimal = Decimal("0.00")
    vote_count: int = 0
    original_language: str = UNKNOWN_LANGUAGE
    runtime: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> CatalogMovie:
        vote_average = row.get("vote_average")
        return cls(
            id=int(row["id"]),
            title=row.get("title") or UNKNOWN_TITLE,
            tmdb_id=row.get("tmdb_id"),
            overview=row.get("overview"),
            poster_path=row.get("poster_path"),
            backdrop_path=row.get("backdrop_path"),
            release_date=row.get("release_date"),
            popularity=float(row.get("popularity") or 0.0),
            vote_average=Decimal(str(vote_average)) if vote_average is not None else Decimal("0.00"),
            vote_count=int(row.get("vote_count") or 0),
            original_language=row.get("original_language") or UNKNOWN_LANGUAGE,
            runtime=row.get("runtime"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def to_row(self) -> dict[str, Any]:
        return asdict(self)
