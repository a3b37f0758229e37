"""
Typed records for the subset of TMDb payloads the catalog consumes.

Each `from_payload` raises `DeserializationError` when the payload is not an
object or lacks its integer `id`; optional fields with unexpected types are
read as missing.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


class TmdbClientError(RuntimeError):
    """Base class for failures talking to TMDb."""

    pass


class DeserializationError(TmdbClientError):
    def __init__(self, message: str, *, path: str) -> None:
        super().__init__(f"{message} (path: {path})")
        self.path = path


def _as_str(value: Any) -> str | None:
    if isinstance(value, str):
        text = value.strip()
        return text or None
    return None


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        raw = value.strip()
        if raw.isdigit():
            return int(raw)
    return None


def _as_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            return float(raw)
        except ValueError:
            return None
    return None


def _require_mapping(payload: Any, *, path: str, what: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise DeserializationError(f"TMDb returned unexpected JSON shape for {what} (not an object)", path=path)
    return payload


def _require_id(payload: Mapping[str, Any], *, path: str, what: str) -> int:
    value = _as_int(payload.get("id"))
    if value is None:
        raise DeserializationError(f"TMDb {what} is missing an integer id", path=path)
    return value


def _list_of_mappings(value: Any) -> list[Mapping[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


@dataclass(frozen=True)
class TmdbGenre:
    id: int
    name: str | None = None

    @classmethod
    def from_payload(cls, payload: Any, *, path: str) -> TmdbGenre:
        data = _require_mapping(payload, path=path, what="genre")
        return cls(id=_require_id(data, path=path, what="genre"), name=_as_str(data.get("name")))


@dataclass(frozen=True)
class TmdbVideo:
    key: str | None = None
    site: str | None = None
    type: str | None = None
    name: str | None = None

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> TmdbVideo:
        return cls(
            key=_as_str(data.get("key")),
            site=_as_str(data.get("site")),
            type=_as_str(data.get("type")),
            name=_as_str(data.get("name")),
        )


@dataclass(frozen=True)
class TmdbCastMember:
    id: int
    name: str | None = None
    character: str | None = None
    order: int | None = None
    profile_path: str | None = None

    @classmethod
    def from_payload(cls, data: Mapping[str, Any], *, path: str) -> TmdbCastMember:
        return cls(
            id=_require_id(data, path=path, what="cast member"),
            name=_as_str(data.get("name")),
            character=_as_str(data.get("character")),
            order=_as_int(data.get("order")),
            profile_path=_as_str(data.get("profile_path")),
        )


@dataclass(frozen=True)
class TmdbMovieSummary:
    """A movie as it appears on ranked list pages (`/movie/popular`, ...)."""

    id: int
    title: str | None = None
    original_title: str | None = None
    overview: str | None = None
    poster_path: str | None = None
    backdrop_path: str | None = None
    release_date: str | None = None
    popularity: float | None = None
    vote_average: float | None = None
    vote_count: int | None = None
    original_language: str | None = None
    genre_ids: tuple[int, ...] = ()

    @staticmethod
    def _summary_fields(data: Mapping[str, Any], *, path: str) -> dict[str, Any]:
        genre_ids = data.get("genre_ids")
        return {
            "id": _require_id(data, path=path, what="movie"),
            "title": _as_str(data.get("title")),
            "original_title": _as_str(data.get("original_title")),
            "overview": _as_str(data.get("overview")),
            "poster_path": _as_str(data.get("poster_path")),
            "backdrop_path": _as_str(data.get("backdrop_path")),
            "release_date": _as_str(data.get("release_date")),
            "popularity": _as_float(data.get("popularity")),
            "vote_average": _as_float(data.get("vote_average")),
            "vote_count": _as_int(data.get("vote_count")),
            "original_language": _as_str(data.get("original_language")),
            "genre_ids": tuple(
                gid for gid in (_as_int(v) for v in (genre_ids if isinstance(genre_ids, list) else [])) if gid is not None
            ),
        }

    @classmethod
    def from_payload(cls, payload: Any, *, path: str) -> TmdbMovieSummary:
        data = _require_mapping(payload, path=path, what="movie")
        return cls(**cls._summary_fields(data, path=path))


@dataclass(frozen=True)
class TmdbMovieDetails(TmdbMovieSummary):
    """
    A movie from `/movie/{id}`, optionally with `append_to_response=videos,credits`.

    Details carry `genres` objects instead of `genre_ids`; both are folded into
    `genre_ids`, and the names are kept in `genres`.
    """

    runtime: int | None = None
    genres: tuple[TmdbGenre, ...] = ()
    videos: tuple[TmdbVideo, ...] = ()
    cast: tuple[TmdbCastMember, ...] = ()

    @classmethod
    def from_payload(cls, payload: Any, *, path: str) -> TmdbMovieDetails:
        data = _require_mapping(payload, path=path, what="movie details")
        fields = cls._summary_fields(data, path=path)

        genres = tuple(
            TmdbGenre(id=gid, name=_as_str(g.get("name")))
            for g in _list_of_mappings(data.get("genres"))
            if (gid := _as_int(g.get("id"))) is not None
        )
        if genres:
            fields["genre_ids"] = fields["genre_ids"] + tuple(g.id for g in genres)

        videos_block = data.get("videos")
        videos = ()
        if isinstance(videos_block, Mapping):
            videos = tuple(TmdbVideo.from_payload(v) for v in _list_of_mappings(videos_block.get("results")))

        credits_block = data.get("credits")
        cast = ()
        if isinstance(credits_block, Mapping):
            # Credits without an id cannot be linked to a person row.
            cast = tuple(
                TmdbCastMember.from_payload(c, path=path)
                for c in _list_of_mappings(credits_block.get("cast"))
                if _as_int(c.get("id")) is not None
            )

        return cls(
            **fields,
            runtime=_as_int(data.get("runtime")),
            genres=genres,
            videos=videos,
            cast=cast,
        )

    def to_summary(self, *, movie_id: int | None = None) -> TmdbMovieSummary:
        """Project to a list-style summary, optionally re-keyed (e.g. to a source id)."""
        return TmdbMovieSummary(
            id=self.id if movie_id is None else int(movie_id),
            title=self.title,
            original_title=self.original_title,
            overview=self.overview,
            poster_path=self.poster_path,
            backdrop_path=self.backdrop_path,
            release_date=self.release_date,
            popularity=self.popularity,
            vote_average=self.vote_average,
            vote_count=self.vote_count,
            original_language=self.original_language,
            genre_ids=self.genre_ids,
        )


@dataclass(frozen=True)
class TmdbMovieListPage:
    page: int = 1
    total_pages: int = 0
    total_results: int = 0
    results: tuple[TmdbMovieSummary, ...] = field(default_factory=tuple)

    @classmethod
    def from_payload(cls, payload: Any, *, path: str) -> TmdbMovieListPage:
        data = _require_mapping(payload, path=path, what="movie list")
        results = data.get("results")
        if results is not None and not isinstance(results, list):
            raise DeserializationError("TMDb movie list `results` is not an array", path=path)
        return cls(
            page=_as_int(data.get("page")) or 1,
            total_pages=_as_int(data.get("total_pages")) or 0,
            total_results=_as_int(data.get("total_results")) or 0,
            results=tuple(TmdbMovieSummary.from_payload(item, path=path) for item in (results or [])),
        )


@dataclass(frozen=True)
class TmdbPersonDetails:
    """TMDb person details from /3/person/{id}."""

    id: int
    name: str | None = None
    biography: str | None = None
    profile_path: str | None = None
    birthday: str | None = None
    place_of_birth: str | None = None

    @classmethod
    def from_payload(cls, payload: Any, *, path: str) -> TmdbPersonDetails:
        data = _require_mapping(payload, path=path, what="person")
        return cls(
            id=_require_id(data, path=path, what="person"),
            name=_as_str(data.get("name")),
            biography=_as_str(data.get("biography")),
            profile_path=_as_str(data.get("profile_path")),
            birthday=_as_str(data.get("birthday")),
            place_of_birth=_as_str(data.get("place_of_birth")),
        )


def parse_genre_list(payload: Any, *, path: str) -> list[TmdbGenre]:
    data = _require_mapping(payload, path=path, what="genre list")
    genres = data.get("genres")
    if not isinstance(genres, list):
        raise DeserializationError("TMDb genre list is missing `genres`", path=path)
    return [TmdbGenre.from_payload(g, path=path) for g in genres]
