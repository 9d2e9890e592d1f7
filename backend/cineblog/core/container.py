import logging
from dataclasses import dataclass
from fastapi import Request

from .cache import CacheService
from .config import Settings
from .exceptions import ConfigurationException
from .document_store import CosmosDocumentStore, SQLDocumentStore
from .interfaces import DocumentStoreInterface, ObjectStoreInterface
from .object_store import AzureBlobObjectStore, LocalObjectStore
from .tmdb_service import TMDBServiceFactory
from cineblog.repositories.post_repository import PostRepository
from cineblog.services.movie_lookup_service import MovieLookupService
from cineblog.services.post_service import PostService

logger = logging.getLogger(__name__)


class BackendFactory:
    """Picks backend implementations from configuration"""

    @staticmethod
    def create_document_store(settings: Settings) -> DocumentStoreInterface:
        if settings.COSMOS_CONNECTION_STRING:
            if not settings.COSMOS_DATABASE_NAME:
                raise ConfigurationException("COSMOS_DATABASE_NAME is required with COSMOS_CONNECTION_STRING")
            logger.info(f"Using Cosmos DB document store ({settings.COSMOS_DATABASE_NAME})")
            return CosmosDocumentStore.from_connection_string(
                settings.COSMOS_CONNECTION_STRING, settings.COSMOS_DATABASE_NAME
            )
        logger.info("Using SQL document store")
        return SQLDocumentStore.from_url(settings.DATABASE_URL)

    @staticmethod
    def create_object_store(settings: Settings) -> ObjectStoreInterface:
        if settings.AZURE_STORAGE_CONNECTION_STRING:
            logger.info(f"Using Azure Blob object store ({settings.AZURE_STORAGE_CONTAINER})")
            return AzureBlobObjectStore.from_connection_string(
                settings.AZURE_STORAGE_CONNECTION_STRING, settings.AZURE_STORAGE_CONTAINER
            )
        if not settings.MEDIA_URL.startswith("/"):
            raise ConfigurationException("MEDIA_URL must be an absolute path, e.g. /media")
        logger.info(f"Using local object store at {settings.MEDIA_ROOT}")
        return LocalObjectStore(settings.MEDIA_ROOT, settings.MEDIA_URL)

    @staticmethod
    def create_movie_lookup(settings: Settings, cache: CacheService) -> MovieLookupService:
        movie_service = None
        if settings.TMDB_API_KEY:
            movie_service = TMDBServiceFactory.create_movie_service(
                api_key=settings.TMDB_API_KEY,
                language=settings.TMDB_LANGUAGE,
                base_url=settings.TMDB_BASE_URL,
                timeout=settings.TMDB_TIMEOUT,
                max_retries=settings.TMDB_MAX_RETRIES,
                cache=cache,
            )
        else:
            logger.warning("TMDB_API_KEY not set, movie lookups are disabled")
        return MovieLookupService(movie_service, image_base_url=settings.TMDB_IMAGE_BASE_URL)


@dataclass
class AppContainer:
    """Process-lifetime backends, built once at startup and injected per request"""
    settings: Settings
    documents: DocumentStoreInterface
    objects: ObjectStoreInterface
    cache: CacheService
    movies: MovieLookupService

    @property
    def posts(self) -> PostRepository:
        return PostRepository(self.documents)

    def post_service(self) -> PostService:
        return PostService(self.posts, self.objects, self.cache)

    def close(self) -> None:
        self.documents.close()
        self.movies.close()
        self.cache.close()


def build_container(settings: Settings) -> AppContainer:
    cache = CacheService.from_url(settings.REDIS_URL)
    return AppContainer(
        settings=settings,
        documents=BackendFactory.create_document_store(settings),
        objects=BackendFactory.create_object_store(settings),
        cache=cache,
        movies=BackendFactory.create_movie_lookup(settings, cache),
    )


def get_container(request: Request) -> AppContainer:
    return request.app.state.container

def get_movie_lookup(request: Request) -> MovieLookupService:
    return get_container(request).movies
