from __future__ import annotations

import pytest

from catalog_backend.db.connection import LocalStoreError
from catalog_backend.ingestion import relations
from catalog_backend.ingestion.relations import (
    MAX_CAST_MEMBERS,
    dedupe_genre_ids,
    normalize_videos,
    reconcile_movie_relations,
    select_top_cast,
)
from catalog_backend.integrations.tmdb.records import TmdbCastMember, TmdbGenre, TmdbMovieDetails, TmdbVideo
from catalog_backend.repositories.genres import UNKNOWN_GENRE


def test_dedupe_genre_ids_keeps_first_occurrence() -> None:
    assert dedupe_genre_ids([28, 12, 28, "12", 16]) == [28, 12, 16]


def test_select_top_cast_caps_and_orders_by_billing() -> None:
    cast = [TmdbCastMember(id=i, order=30 - i) for i in range(30)]
    top = select_top_cast(cast)
    assert len(top) == MAX_CAST_MEMBERS
    assert [m.order for m in top] == list(range(1, 21))


def test_select_top_cast_drops_duplicate_credits() -> None:
    cast = [TmdbCastMember(id=1, order=0), TmdbCastMember(id=1, order=0), TmdbCastMember(id=1, order=4)]
    assert [(m.id, m.order) for m in select_top_cast(cast)] == [(1, 0), (1, 4)]


def test_normalize_videos_filters_site_and_fills_sentinels() -> None:
    videos = [
        TmdbVideo(key="a", site="YouTube", type="Trailer", name="T"),
        TmdbVideo(key=None, site="youtube", type=None, name=None),
        TmdbVideo(key="v", site="Vimeo", type="Clip", name="C"),
        TmdbVideo(key="n", site=None, type="Clip", name="C"),
    ]
    rows = normalize_videos(videos)
    assert rows == [
        {"key": "a", "site": "YouTube", "type": "Trailer", "name": "T"},
        {"key": "missing-key", "site": "youtube", "type": "unknown-type", "name": "unknown-name"},
    ]


def test_reconcile_replaces_all_relations(store, conn) -> None:  # noqa: ANN001
    store.add_movie(1)
    store.movie_genres[1] = [99]
    store.cast[1] = [{"person_id": 5, "cast_order": 0, "character": "Old"}]
    store.videos[1] = [{"key": "old", "site": "YouTube", "type": "Clip", "name": "Old"}]
    cast = [TmdbCastMember(id=100 + i, name=f"A{i}", order=i) for i in range(25)]

    reconcile_movie_relations(
        conn,
        1,
        genre_ids=[28, 12, 28],
        genres=[TmdbGenre(28, "Action")],
        cast=cast,
        videos=[TmdbVideo(key="new", site="YouTube", type="Trailer", name="New")],
    )

    assert store.movie_genres[1] == [28, 12]
    assert store.genres == {28: "Action", 12: UNKNOWN_GENRE}
    assert len(store.cast[1]) == MAX_CAST_MEMBERS
    assert {r["person_id"] for r in store.cast[1]} == {100 + i for i in range(20)}
    assert len(store.people) == MAX_CAST_MEMBERS
    assert [v["key"] for v in store.videos[1]] == ["new"]
    assert [s for s, _ in conn.statements] == ["SAVEPOINT reconcile_movie", "RELEASE SAVEPOINT reconcile_movie"]


def test_reconcile_without_cast_or_videos_leaves_them(store, conn) -> None:  # noqa: ANN001
    store.cast[1] = [{"person_id": 5, "cast_order": 0, "character": "Kept"}]
    store.videos[1] = [{"key": "kept", "site": "YouTube", "type": "Clip", "name": "Kept"}]

    reconcile_movie_relations(conn, 1, genre_ids=[16])

    assert store.movie_genres[1] == [16]
    assert store.cast[1][0]["character"] == "Kept"
    assert store.videos[1][0]["key"] == "kept"


def test_reconcile_failure_rolls_back_to_savepoint(store, conn, monkeypatch: pytest.MonkeyPatch) -> None:  # noqa: ANN001
    store.movie_genres[1] = [99]

    def _boom(*_args, **_kwargs):  # noqa: ANN002, ANN003
        raise LocalStoreError("insert failed")

    monkeypatch.setattr(relations, "replace_movie_videos", _boom)

    with pytest.raises(LocalStoreError):
        reconcile_movie_relations(conn, 1, genre_ids=[28], cast=[], videos=[])

    assert store.movie_genres[1] == [99]
    assert conn.statements[-1][0] == "ROLLBACK TO SAVEPOINT reconcile_movie"


def test_select_top_cast_puts_unranked_credits_last() -> None:
    payload = {
        "id": 7,
        "credits": {"cast": [{"id": i, "name": f"A{i}", "order": i} for i in range(20)] + [{"id": 999, "name": "Extra"}]},
    }
    details = TmdbMovieDetails.from_payload(payload, path="/movie/7")

    top = [m.id for m in select_top_cast(details.cast)]

    assert top == list(range(20))
    assert 999 not in top


def test_reconcile_numbers_unranked_credits_after_ranked(store, conn) -> None:  # noqa: ANN001
    cast = [TmdbCastMember(id=2, name="B"), TmdbCastMember(id=1, name="A", order=3)]

    reconcile_movie_relations(conn, 1, genre_ids=[], cast=cast)

    assert [(r["person_id"], r["cast_order"]) for r in store.cast[1]] == [(1, 3), (2, 4)]
