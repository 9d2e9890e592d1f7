import logging
from typing import Any, Dict, List, Optional
from pydantic import ValidationError
from cineblog.core.exceptions import MovieLookupException
from cineblog.core.interfaces import MovieServiceInterface, TMDBError
from cineblog.schemas.movie import (
    CAST_LIMIT, DEFAULT_IMAGE_BASE_URL, SEARCH_RESULT_LIMIT,
    CastMember, Genre, MovieDetails, MovieSearchResult
)

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 3

class MovieLookupService:
    """Movie search and details for the post form and the movie card"""

    def __init__(self, movie_service: Optional[MovieServiceInterface], image_base_url: str = DEFAULT_IMAGE_BASE_URL):
        # movie_service is None when no TMDB API key is configured
        self.movie_service = movie_service
        self.image_base_url = image_base_url.rstrip("/")

    def _require_service(self) -> MovieServiceInterface:
        if self.movie_service is None:
            logger.error("TMDB API Key is not configured.")
            raise MovieLookupException("TMDB API Key is not configured.")
        return self.movie_service

    def find_movies(self, query: str) -> List[MovieSearchResult]:
        """Search TMDB, raising MovieLookupException on any failure"""
        query = (query or "").strip()
        if len(query) < MIN_QUERY_LENGTH:
            return []
        service = self._require_service()
        try:
            response = service.search_movies(query)
        except TMDBError as e:
            raise MovieLookupException("Failed to fetch movies.") from e
        if not response.success:
            raise MovieLookupException(f"Failed to fetch movies (status {response.status_code}).")

        results = []
        for item in (response.data.get("results") or [])[:SEARCH_RESULT_LIMIT]:
            try:
                results.append(MovieSearchResult.model_validate(item))
            except ValidationError:
                logger.warning(f"Skipping malformed search result: {item!r}")
        return results

    def search(self, query: str) -> List[MovieSearchResult]:
        """Search TMDB; failures are logged and yield no results"""
        try:
            return self.find_movies(query)
        except MovieLookupException as e:
            logger.error(f"Failed to fetch movies: {e.message}")
            return []

    def get_details(self, movie_id: int) -> MovieDetails:
        """Overview, top cast, director and genres for one movie"""
        service = self._require_service()
        try:
            response = service.get_movie_details(movie_id)
        except TMDBError as e:
            logger.error(f"Failed to fetch movie details from TMDB: {e.message}")
            raise MovieLookupException() from e
        if not response.success:
            logger.error(f"Failed to fetch movie details from TMDB: status {response.status_code}")
            raise MovieLookupException()
        return self._to_details(response.data)

    @staticmethod
    def _to_details(data: Dict[str, Any]) -> MovieDetails:
        credits = data.get("credits") or {}
        director = next(
            (person.get("name") for person in credits.get("crew") or [] if person.get("job") == "Director"),
            None
        )
        cast = [
            CastMember(
                name=person.get("name", ""),
                character=person.get("character"),
                profile_path=person.get("profile_path"),
            )
            for person in (credits.get("cast") or [])[:CAST_LIMIT]
        ]
        genres = [Genre(id=g["id"], name=g["name"]) for g in data.get("genres") or [] if "id" in g and "name" in g]
        return MovieDetails(
            overview=data.get("overview") or "",
            cast=cast,
            director=director or "N/A",
            genres=genres,
        )

    def snapshot_fields(self, movie: MovieSearchResult) -> Dict[str, str]:
        """Hidden form fields copying a selected movie into the post"""
        return {
            "movieApiId": str(movie.id),
            "movieTitle": movie.title,
            "moviePosterUrl": movie.poster_url("w500", self.image_base_url),
            "movieReleaseDate": movie.release_date or "",
        }

    def thumbnail_url(self, movie: MovieSearchResult) -> str:
        return movie.poster_url("w92", self.image_base_url)

    def close(self) -> None:
        if self.movie_service is not None:
            self.movie_service.close()
