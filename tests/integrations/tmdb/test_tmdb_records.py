from __future__ import annotations

import pytest

from catalog_backend.integrations.tmdb.records import (
    DeserializationError,
    TmdbMovieDetails,
    TmdbMovieListPage,
    TmdbMovieSummary,
    TmdbPersonDetails,
    parse_genre_list,
)
from tests.fakes import movie_details_payload, movie_summary_payload


def test_summary_reads_optional_fields_leniently() -> None:
    payload = movie_summary_payload(5, title="  ", vote_count="12", popularity=True, genre_ids=[1, "2", None, "x"])
    summary = TmdbMovieSummary.from_payload(payload, path="/movie/popular")
    assert summary.title is None
    assert summary.vote_count == 12
    assert summary.popularity is None
    assert summary.genre_ids == (1, 2)


def test_summary_requires_integer_id() -> None:
    with pytest.raises(DeserializationError, match="missing an integer id"):
        TmdbMovieSummary.from_payload({"title": "No id"}, path="/movie/popular")


def test_details_fold_genres_videos_and_cast() -> None:
    details = TmdbMovieDetails.from_payload(movie_details_payload(9, cast_size=2), path="/movie/9")
    assert details.genre_ids == (28, 12)
    assert [g.name for g in details.genres] == ["Action", "Adventure"]
    assert [v.site for v in details.videos] == ["YouTube", "Vimeo"]
    assert [c.id for c in details.cast] == [1000, 1001]
    assert details.runtime == 120


def test_details_without_nested_blocks() -> None:
    details = TmdbMovieDetails.from_payload({"id": 3, "title": "Bare"}, path="/movie/3")
    assert details.videos == ()
    assert details.cast == ()
    assert details.runtime is None


def test_details_skip_cast_entries_without_id() -> None:
    payload = {
        "id": 4,
        "credits": {"cast": [{"name": "No id", "order": 0}, {"id": "x", "order": 1}, {"id": 12, "order": 2}, {"id": 13}]},
    }
    details = TmdbMovieDetails.from_payload(payload, path="/movie/4")
    assert [(c.id, c.order) for c in details.cast] == [(12, 2), (13, None)]


def test_details_still_require_top_level_id() -> None:
    with pytest.raises(DeserializationError, match="missing an integer id"):
        TmdbMovieDetails.from_payload({"credits": {"cast": [{"id": 1}]}}, path="/movie/4")


def test_to_summary_rekeys_to_source_id() -> None:
    details = TmdbMovieDetails.from_payload(movie_details_payload(862), path="/movie/862")
    summary = details.to_summary(movie_id=1)
    assert summary.id == 1
    assert summary.title == details.title
    assert not isinstance(summary, TmdbMovieDetails)


def test_list_page_rejects_non_array_results() -> None:
    with pytest.raises(DeserializationError):
        TmdbMovieListPage.from_payload({"page": 1, "results": {"id": 1}}, path="/movie/popular")


def test_person_details() -> None:
    person = TmdbPersonDetails.from_payload(
        {"id": 31, "name": "Tom Hanks", "biography": "", "birthday": "1956-07-09", "place_of_birth": "Concord"},
        path="/person/31",
    )
    assert person.biography is None
    assert person.birthday == "1956-07-09"


def test_parse_genre_list_requires_genres_array() -> None:
    assert [g.id for g in parse_genre_list({"genres": [{"id": 1, "name": "A"}]}, path="/genre/movie/list")] == [1]
    with pytest.raises(DeserializationError):
        parse_genre_list({"status": "nope"}, path="/genre/movie/list")
