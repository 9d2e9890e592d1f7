from unittest.mock import MagicMock

import pytest

from cineblog.core.exceptions import MovieLookupException
from cineblog.core.interfaces import TMDBError, TMDBResponse
from cineblog.schemas.movie import MovieSearchResult
from cineblog.services.movie_lookup_service import MovieLookupService
from tests.conftest import details_payload, search_payload, tmdb_ok


class TestSearch:
    def test_short_query_skips_tmdb(self, movie_lookup, tmdb_client):
        assert movie_lookup.search("in") == []
        assert movie_lookup.search("   ") == []
        tmdb_client.make_request.assert_not_called()

    def test_results_are_capped_at_five(self, movie_lookup, tmdb_client):
        tmdb_client.make_request.return_value = tmdb_ok(search_payload(8))

        results = movie_lookup.search("Inception")

        assert len(results) == 5
        assert results[0].id == 27205
        assert results[0].year == "2010"

    def test_malformed_results_are_skipped(self, movie_lookup, tmdb_client):
        tmdb_client.make_request.return_value = tmdb_ok({"results": [{"title": "No id"}, {"id": 1, "title": "Ok"}]})
        assert [m.title for m in movie_lookup.search("whatever")] == ["Ok"]

    def test_failure_yields_no_results(self, movie_lookup, tmdb_client):
        tmdb_client.make_request.side_effect = TMDBError("timeout")
        assert movie_lookup.search("Inception") == []

    def test_find_movies_raises_on_failure(self, movie_lookup, tmdb_client):
        tmdb_client.make_request.return_value = TMDBResponse({}, 500, False)
        with pytest.raises(MovieLookupException):
            movie_lookup.find_movies("Inception")

    def test_unconfigured_lookup(self):
        lookup = MovieLookupService(None)
        assert lookup.search("Inception") == []
        with pytest.raises(MovieLookupException) as exc_info:
            lookup.find_movies("Inception")
        assert exc_info.value.message == "TMDB API Key is not configured."


class TestDetails:
    def test_details(self, movie_lookup, tmdb_client):
        tmdb_client.make_request.return_value = tmdb_ok(details_payload())

        details = movie_lookup.get_details(157336)

        assert details.overview == "A team travels through a wormhole."
        assert details.director == "Christopher Nolan"
        assert len(details.cast) == 6
        assert details.cast[0].character == "Role 0"
        assert [g.name for g in details.genres] == ["Adventure", "Drama"]

    def test_missing_director(self, movie_lookup, tmdb_client):
        tmdb_client.make_request.return_value = tmdb_ok(details_payload(cast_size=2, with_director=False))

        details = movie_lookup.get_details(1)

        assert details.director == "N/A"
        assert len(details.cast) == 2

    @pytest.mark.parametrize("failure", [
        {"side_effect": TMDBError("timeout")},
        {"return_value": TMDBResponse({}, 404, False)},
    ])
    def test_failures_raise(self, failure):
        movie_service = MagicMock()
        movie_service.get_movie_details.configure_mock(**failure)
        lookup = MovieLookupService(movie_service)

        with pytest.raises(MovieLookupException) as exc_info:
            lookup.get_details(1)
        assert exc_info.value.message == "Could not retrieve movie details."

    def test_unconfigured(self):
        with pytest.raises(MovieLookupException):
            MovieLookupService(None).get_details(1)


def test_snapshot_fields_and_thumbnail():
    lookup = MovieLookupService(None, image_base_url="https://image.tmdb.org/t/p/")
    movie = MovieSearchResult(id=157336, title="Interstellar", release_date="2014-11-05", poster_path="/p.jpg")

    assert lookup.snapshot_fields(movie) == {
        "movieApiId": "157336",
        "movieTitle": "Interstellar",
        "moviePosterUrl": "https://image.tmdb.org/t/p/w500/p.jpg",
        "movieReleaseDate": "2014-11-05",
    }
    assert lookup.thumbnail_url(movie) == "https://image.tmdb.org/t/p/w92/p.jpg"
    assert lookup.thumbnail_url(MovieSearchResult(id=1, title="No poster")) == ""
