from typing import Optional
from ..interfaces import MovieServiceInterface, TMDBResponse, TMDBClientInterface
from ..cache import CacheService

CACHE_TTL_24H = 24 * 60 * 60

class MovieService(MovieServiceInterface):
    """Service class for movie-related operations"""

    def __init__(self, client: TMDBClientInterface, cache: Optional[CacheService] = None):
        self.client = client
        self.cache = cache or CacheService()

    def search_movies(self, query: str, page: int = 1) -> TMDBResponse:
        """Search movies by query"""
        params = {"query": query, "page": page}
        return self.client.make_request("search/movie", params)

    def get_movie_details(self, movie_id: int) -> TMDBResponse:
        """Get movie details by ID, credits included"""
        cache_key = f"tmdb:movie:{movie_id}:details"
        cached = self.cache.get_json(cache_key)
        if cached is not None:
            return TMDBResponse(cached, 200, True)
        params = {"append_to_response": "credits"}
        resp = self.client.make_request(f"movie/{movie_id}", params)
        if resp.success:
            self.cache.set_json(cache_key, resp.data, CACHE_TTL_24H)
        return resp

    def close(self) -> None:
        self.client.close()
