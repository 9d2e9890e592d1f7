import logging
from typing import Optional
from .cache import CacheService
from .interfaces import TMDBConfig
from .tmdb_client import TMDBClient
from .services import MovieService

logger = logging.getLogger(__name__)

class TMDBServiceFactory:
    """Factory class for creating TMDB services"""

    @staticmethod
    def create_movie_service(
        api_key: str,
        language: str = "en-US",
        base_url: Optional[str] = None,
        timeout: int = 10,
        max_retries: int = 0,
        cache: Optional[CacheService] = None,
    ) -> MovieService:
        """Create a new movie service instance"""
        config = TMDBConfig(api_key=api_key, language=language, timeout=timeout, max_retries=max_retries)
        if base_url:
            config.base_url = base_url
        client = TMDBClient(config)
        logger.info(f"TMDB movie service ready ({config.base_url}, {language})")
        return MovieService(client, cache=cache)
