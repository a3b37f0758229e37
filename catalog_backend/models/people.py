from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any

UNKNOWN_PERSON = "(unknown person)"


@dataclass(frozen=True)
class PersonRecord:
    """Person row (maps to `catalog.people`); `id` is the TMDb person id."""

    id: int
    name: str
    profile_path: str | None = None
    biography: str | None = None
    birthday: date | None = None
    place_of_birth: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> PersonRecord:
        return cls(
            id=int(row["id"]),
            name=row.get("name") or UNKNOWN_PERSON,
            profile_path=row.get("profile_path"),
            biography=row.get("biography"),
            birthday=row.get("birthday"),
            place_of_birth=row.get("place_of_birth"),
        )

    def to_row(self) -> dict[str, Any]:
        return asdict(self)
