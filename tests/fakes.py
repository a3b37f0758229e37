"""
In-memory stand-ins for the catalog store.

`FakeCatalogStore` implements the repository functions the ingestion modules
import (same names, same signatures) on top of plain dicts. `FakeConnection`
snapshots the store on commit and restores it on rollback, and understands the
SAVEPOINT statements issued by `catalog_backend.db.connection.savepoint`.
"""
from __future__ import annotations

import copy
from datetime import datetime
from typing import Any

from catalog_backend.models.movies import CatalogMovie
from catalog_backend.models.people import PersonRecord
from catalog_backend.repositories.genres import UNKNOWN_GENRE

REPOSITORY_FUNCTIONS = (
    "find_movie",
    "upsert_movie",
    "set_movie_tmdb_id",
    "list_movie_ids_with_tmdb_mapping",
    "find_link",
    "find_link_by_tmdb_id",
    "list_links_with_tmdb_id",
    "list_links_missing_movies",
    "upsert_genre",
    "ensure_genres_exist",
    "replace_movie_genres",
    "list_movie_genre_ids",
    "find_person",
    "upsert_person",
    "list_people_missing_details",
    "replace_movie_cast",
    "list_movie_cast",
    "replace_movie_videos",
    "list_movie_videos",
    "upsert_list_entry",
    "find_account_session_id",
)

_STATE_ATTRS = (
    "movies",
    "genres",
    "movie_genres",
    "people",
    "cast",
    "videos",
    "list_entries",
    "links",
    "accounts",
)


class FakeCatalogStore:
    def __init__(self) -> None:
        self.movies: dict[int, dict[str, Any]] = {}
        self.genres: dict[int, str] = {}
        self.movie_genres: dict[int, list[int]] = {}
        self.people: dict[int, dict[str, Any]] = {}
        self.cast: dict[int, list[dict[str, Any]]] = {}
        self.videos: dict[int, list[dict[str, Any]]] = {}
        self.list_entries: dict[tuple[int, str], dict[str, Any]] = {}
        self.links: dict[int, dict[str, Any]] = {}
        self.accounts: dict[int, str] = {}

    # --- snapshot support ---

    def snapshot(self) -> dict[str, Any]:
        return {name: copy.deepcopy(getattr(self, name)) for name in _STATE_ATTRS}

    def restore(self, state: dict[str, Any]) -> None:
        for name, value in state.items():
            setattr(self, name, copy.deepcopy(value))

    def install(self, monkeypatch, *modules) -> None:  # noqa: ANN001
        """Patch every repository function a module imported with this store's version."""
        for module in modules:
            for name in REPOSITORY_FUNCTIONS:
                if hasattr(module, name):
                    monkeypatch.setattr(module, name, getattr(self, name))

    # --- seeding helpers ---

    def add_link(self, movie_id: int, tmdb_id: int | None, imdb_id: int | None = None) -> None:
        self.links[movie_id] = {"movie_id": movie_id, "imdb_id": imdb_id, "tmdb_id": tmdb_id}

    def add_movie(self, movie_id: int, **fields: Any) -> dict[str, Any]:
        row = CatalogMovie(id=movie_id, title=fields.pop("title", f"Movie {movie_id}"), **fields).to_row()
        self.movies[movie_id] = row
        return row

    def add_person(self, person_id: int, **fields: Any) -> dict[str, Any]:
        row = PersonRecord(id=person_id, name=fields.pop("name", f"Person {person_id}"), **fields).to_row()
        self.people[person_id] = row
        return row

    # --- movies ---

    def find_movie(self, conn, movie_id: int) -> dict[str, Any] | None:  # noqa: ANN001
        row = self.movies.get(int(movie_id))
        return dict(row) if row is not None else None

    def upsert_movie(self, conn, movie: CatalogMovie) -> dict[str, Any]:  # noqa: ANN001
        row = movie.to_row()
        existing = self.movies.get(movie.id)
        if existing is not None:
            row["created_at"] = existing["created_at"]
        self.movies[movie.id] = row
        return dict(row)

    def set_movie_tmdb_id(self, conn, movie_id: int, tmdb_id: int, *, updated_at: datetime) -> None:  # noqa: ANN001
        row = self.movies.get(int(movie_id))
        if row is not None:
            row["tmdb_id"] = int(tmdb_id)
            row["updated_at"] = updated_at

    def list_movie_ids_with_tmdb_mapping(self, conn, *, start_after_id=None, limit: int) -> list[int]:  # noqa: ANN001
        ids = []
        for movie_id in sorted(self.movies):
            if start_after_id is not None and movie_id <= start_after_id:
                continue
            link = self.links.get(movie_id) or {}
            if self.movies[movie_id].get("tmdb_id") is None and link.get("tmdb_id") is None:
                continue
            ids.append(movie_id)
        return ids[: max(0, int(limit))]

    # --- links ---

    def find_link(self, conn, movie_id: int) -> dict[str, Any] | None:  # noqa: ANN001
        link = self.links.get(int(movie_id))
        return dict(link) if link is not None else None

    def find_link_by_tmdb_id(self, conn, tmdb_id: int) -> dict[str, Any] | None:  # noqa: ANN001
        for movie_id in sorted(self.links):
            if self.links[movie_id].get("tmdb_id") == int(tmdb_id):
                return dict(self.links[movie_id])
        return None

    def list_links_with_tmdb_id(self, conn, *, start_after_id=None, limit=None) -> list[dict[str, Any]]:  # noqa: ANN001
        rows = [
            dict(self.links[movie_id])
            for movie_id in sorted(self.links)
            if self.links[movie_id].get("tmdb_id") is not None
            and (start_after_id is None or movie_id > start_after_id)
        ]
        return rows if limit is None else rows[: max(0, int(limit))]

    def list_links_missing_movies(self, conn, *, limit: int) -> list[dict[str, Any]]:  # noqa: ANN001
        rows = [
            dict(self.links[movie_id])
            for movie_id in sorted(self.links)
            if self.links[movie_id].get("tmdb_id") is not None and movie_id not in self.movies
        ]
        return rows[: max(0, int(limit))]

    # --- genres ---

    def upsert_genre(self, conn, genre_id: int, name: str) -> None:  # noqa: ANN001
        self.genres[int(genre_id)] = name

    def ensure_genres_exist(self, conn, genre_ids) -> None:  # noqa: ANN001
        for genre_id in genre_ids:
            self.genres.setdefault(int(genre_id), UNKNOWN_GENRE)

    def replace_movie_genres(self, conn, movie_id: int, genre_ids) -> None:  # noqa: ANN001
        ids = [int(g) for g in genre_ids]
        if len(ids) != len(set(ids)):
            raise AssertionError(f"duplicate genre link for movie {movie_id}: {ids}")
        self.movie_genres[int(movie_id)] = ids

    def list_movie_genre_ids(self, conn, movie_id: int) -> list[int]:  # noqa: ANN001
        return sorted(self.movie_genres.get(int(movie_id), []))

    # --- people ---

    def find_person(self, conn, person_id: int) -> dict[str, Any] | None:  # noqa: ANN001
        row = self.people.get(int(person_id))
        return dict(row) if row is not None else None

    def upsert_person(self, conn, person: PersonRecord) -> dict[str, Any]:  # noqa: ANN001
        self.people[person.id] = person.to_row()
        return dict(self.people[person.id])

    def list_people_missing_details(self, conn, *, limit: int, start_after_id=None) -> list[int]:  # noqa: ANN001
        ids = [
            person_id
            for person_id in sorted(self.people)
            if (start_after_id is None or person_id > start_after_id)
            and any(self.people[person_id].get(k) is None for k in ("biography", "birthday", "place_of_birth"))
        ]
        return ids[: max(0, int(limit))]

    # --- cast / videos ---

    def replace_movie_cast(self, conn, movie_id: int, rows) -> None:  # noqa: ANN001
        self.cast[int(movie_id)] = [dict(r) for r in rows]

    def list_movie_cast(self, conn, movie_id: int) -> list[dict[str, Any]]:  # noqa: ANN001
        return [dict(r) for r in self.cast.get(int(movie_id), [])]

    def replace_movie_videos(self, conn, movie_id: int, rows) -> None:  # noqa: ANN001
        self.videos[int(movie_id)] = [dict(r) for r in rows]

    def list_movie_videos(self, conn, movie_id: int) -> list[dict[str, Any]]:  # noqa: ANN001
        return [dict(r) for r in self.videos.get(int(movie_id), [])]

    # --- list entries / accounts ---

    def upsert_list_entry(self, conn, *, movie_id: int, list_type: str, page: int, position: int) -> None:  # noqa: ANN001
        self.list_entries[(int(movie_id), list_type)] = {
            "movie_id": int(movie_id),
            "list_type": list_type,
            "page": int(page),
            "position": int(position),
        }

    def find_account_session_id(self, conn, account_id: int) -> str | None:  # noqa: ANN001
        return self.accounts.get(int(account_id))


class FakeCursor:
    def __init__(self, conn: FakeConnection) -> None:
        self._conn = conn
        self.rowcount = 0
        self._rows: list[dict[str, Any]] = []

    def __enter__(self) -> FakeCursor:
        return self

    def __exit__(self, *exc) -> None:  # noqa: ANN002
        return None

    def execute(self, sql: str, params=None) -> None:  # noqa: ANN001
        self._conn.statements.append((sql, params))
        words = sql.split()
        if words[:1] == ["SAVEPOINT"]:
            self._conn.savepoints.append((words[1], self._conn.store.snapshot() if self._conn.store else None))
        elif words[:3] == ["ROLLBACK", "TO", "SAVEPOINT"]:
            name = words[3]
            while self._conn.savepoints:
                sp_name, state = self._conn.savepoints[-1]
                if sp_name == name:
                    if state is not None:
                        self._conn.store.restore(state)
                    break
                self._conn.savepoints.pop()
        elif words[:2] == ["RELEASE", "SAVEPOINT"]:
            name = words[2]
            while self._conn.savepoints:
                sp_name, _ = self._conn.savepoints.pop()
                if sp_name == name:
                    break
        self._rows = list(self._conn.results.pop(0)) if self._conn.results else []
        self.rowcount = len(self._rows)

    def fetchone(self) -> dict[str, Any] | None:
        return self._rows[0] if self._rows else None

    def fetchall(self) -> list[dict[str, Any]]:
        return list(self._rows)


class FakeConnection:
    """
    Records commits, rollbacks and raw statements.

    With a store attached, rollback restores the state of the last commit.
    `results` is a queue of row lists handed to successive cursor executions.
    """

    def __init__(self, store: FakeCatalogStore | None = None) -> None:
        self.store = store
        self.commits = 0
        self.rollbacks = 0
        self.closed = False
        self.statements: list[tuple[str, Any]] = []
        self.savepoints: list[tuple[str, Any]] = []
        self.results: list[list[dict[str, Any]]] = []
        self._committed = store.snapshot() if store is not None else None

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def commit(self) -> None:
        self.commits += 1
        self.savepoints.clear()
        if self.store is not None:
            self._committed = self.store.snapshot()

    def rollback(self) -> None:
        self.rollbacks += 1
        self.savepoints.clear()
        if self.store is not None and self._committed is not None:
            self.store.restore(self._committed)

    def close(self) -> None:
        self.closed = True


# --- TMDb payload builders ---


def movie_summary_payload(tmdb_id: int, **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": tmdb_id,
        "title": f"Movie {tmdb_id}",
        "original_title": f"Original {tmdb_id}",
        "overview": f"Overview {tmdb_id}",
        "poster_path": f"/poster{tmdb_id}.jpg",
        "backdrop_path": f"/backdrop{tmdb_id}.jpg",
        "release_date": "2020-05-01",
        "popularity": 12.5,
        "vote_average": 7.25,
        "vote_count": 100,
        "original_language": "en",
        "genre_ids": [28, 12],
    }
    payload.update(overrides)
    return payload


def movie_details_payload(tmdb_id: int, *, cast_size: int = 3, **overrides: Any) -> dict[str, Any]:
    payload = movie_summary_payload(tmdb_id)
    payload.pop("genre_ids")
    payload.update(
        {
            "runtime": 120,
            "genres": [{"id": 28, "name": "Action"}, {"id": 12, "name": "Adventure"}],
            "videos": {
                "results": [
                    {"key": "abc", "site": "YouTube", "type": "Trailer", "name": "Official Trailer"},
                    {"key": "vim", "site": "Vimeo", "type": "Teaser", "name": "Teaser"},
                ]
            },
            "credits": {
                "cast": [
                    {
                        "id": 1000 + i,
                        "name": f"Actor {i}",
                        "character": f"Role {i}",
                        "order": i,
                        "profile_path": f"/p{i}.jpg",
                    }
                    for i in range(cast_size)
                ]
            },
        }
    )
    payload.update(overrides)
    return payload
