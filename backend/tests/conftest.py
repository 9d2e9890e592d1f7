"""
Shared Test Fixtures for Cineblog

Backends are real where that is cheap (sqlite document store and a local
object store under tmp_path) and faked where it is not (Redis, TMDB).
"""

import pytest
from datetime import datetime, timezone
from unittest.mock import MagicMock
from typing import Any, Dict, Optional

from fastapi.testclient import TestClient

from cineblog.core.cache import CacheService
from cineblog.core.config import Settings
from cineblog.core.container import AppContainer
from cineblog.core.document_store import SQLDocumentStore
from cineblog.core.interfaces import TMDBResponse
from cineblog.core.object_store import LocalObjectStore
from cineblog.core.services.movie_service import MovieService
from cineblog.main import create_app
from cineblog.repositories.post_repository import PostRepository
from cineblog.services.movie_lookup_service import MovieLookupService
from cineblog.services.post_service import PostService


FIXED_NOW = datetime(2025, 9, 10, 12, 0, 0, tzinfo=timezone.utc)

VALID_CONTENT = (
    "<p>Nolan's Interstellar bends time, grief and gravity into one long, "
    "aching look at what we owe the people we leave behind.</p>"
)


# =============================================================================
# Fakes
# =============================================================================

class InMemoryRedis:
    """Just enough of the redis.Redis surface for CacheService"""

    def __init__(self):
        self.store: Dict[str, bytes] = {}
        self.ttls: Dict[str, int] = {}
        self.fail = False

    def _check(self):
        if self.fail:
            raise ConnectionError("redis is down")

    def get(self, key: str) -> Optional[bytes]:
        self._check()
        return self.store.get(key)

    def setex(self, key: str, ttl: int, value: bytes) -> bool:
        self._check()
        self.store[key] = value
        self.ttls[key] = ttl
        return True

    def delete(self, key: str) -> int:
        self._check()
        return 1 if self.store.pop(key, None) is not None else 0

    def close(self) -> None:
        pass


def tmdb_ok(data: Dict[str, Any]) -> TMDBResponse:
    return TMDBResponse(data, 200, True)


def search_payload(count: int = 1) -> Dict[str, Any]:
    return {
        "results": [
            {
                "id": 27205 + i,
                "title": f"Inception {i}" if i else "Inception",
                "release_date": "2010-07-15",
                "poster_path": f"/poster{i}.jpg",
            }
            for i in range(count)
        ]
    }


def details_payload(cast_size: int = 8, with_director: bool = True) -> Dict[str, Any]:
    crew = [{"name": "Hans Zimmer", "job": "Original Music Composer"}]
    if with_director:
        crew.append({"name": "Christopher Nolan", "job": "Director"})
    return {
        "overview": "A team travels through a wormhole.",
        "genres": [{"id": 12, "name": "Adventure"}, {"id": 18, "name": "Drama"}],
        "credits": {
            "cast": [{"name": f"Actor {i}", "character": f"Role {i}"} for i in range(cast_size)],
            "crew": crew,
        },
    }


# =============================================================================
# Backend Fixtures
# =============================================================================

@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'cineblog-test.db'}",
        MEDIA_ROOT=str(tmp_path / "media"),
        MEDIA_URL="/media",
        TMDB_API_KEY="test-tmdb-key",
        REDIS_URL="",
        COSMOS_CONNECTION_STRING=None,
        AZURE_STORAGE_CONNECTION_STRING=None,
        AUTHOR_NAME="Livya",
    )


@pytest.fixture
def document_store(settings):
    store = SQLDocumentStore.from_url(settings.DATABASE_URL)
    yield store
    store.close()


@pytest.fixture
def object_store(settings):
    return LocalObjectStore(settings.MEDIA_ROOT, settings.MEDIA_URL)


@pytest.fixture
def redis_client():
    return InMemoryRedis()


@pytest.fixture
def cache(redis_client):
    return CacheService(redis_client)


@pytest.fixture
def tmdb_client():
    """MagicMock standing in for TMDBClient.make_request"""
    client = MagicMock()
    client.make_request.return_value = tmdb_ok(search_payload())
    return client


@pytest.fixture
def movie_lookup(tmdb_client, cache):
    return MovieLookupService(MovieService(tmdb_client, cache=cache))


@pytest.fixture
def post_repository(document_store):
    return PostRepository(document_store)


@pytest.fixture
def post_service(post_repository, object_store, cache):
    return PostService(post_repository, object_store, cache, clock=lambda: FIXED_NOW)


@pytest.fixture
def container(settings, document_store, object_store, cache, movie_lookup):
    return AppContainer(
        settings=settings,
        documents=document_store,
        objects=object_store,
        cache=cache,
        movies=movie_lookup,
    )


@pytest.fixture
def client(container):
    app = create_app(container=container)
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# Data Factories
# =============================================================================

@pytest.fixture
def valid_fields():
    """Raw form fields for a post that passes validation"""
    def _factory(**overrides) -> Dict[str, Any]:
        fields = {
            "title": "An Analysis: Interstellar!",
            "content": VALID_CONTENT,
            "movieApiId": "",
            "movieTitle": "",
            "moviePosterUrl": "",
            "movieReleaseDate": "",
        }
        fields.update(overrides)
        return fields
    return _factory
