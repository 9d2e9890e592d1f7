import pytest

from cineblog.core.container import BackendFactory, build_container
from cineblog.core.document_store import SQLDocumentStore
from cineblog.core.exceptions import ConfigurationException
from cineblog.core.object_store import LocalObjectStore
from cineblog.core.services.movie_service import MovieService


def test_defaults_to_sql_and_local_media(settings, tmp_path):
    container = build_container(settings)
    try:
        assert isinstance(container.documents, SQLDocumentStore)
        assert isinstance(container.objects, LocalObjectStore)
        assert not container.cache.enabled
        assert isinstance(container.movies.movie_service, MovieService)
        assert (tmp_path / "media").is_dir()
    finally:
        container.close()


def test_movie_lookup_without_api_key(settings, cache):
    settings.TMDB_API_KEY = None
    lookup = BackendFactory.create_movie_lookup(settings, cache)
    assert lookup.movie_service is None
    assert lookup.search("Inception") == []


def test_container_wires_post_service(container):
    service = container.post_service()
    assert service.object_store is container.objects
    assert service.cache is container.cache
    assert service.repository.store is container.documents


def test_relative_media_url_is_rejected(settings):
    settings.MEDIA_URL = "media"
    with pytest.raises(ConfigurationException):
        BackendFactory.create_object_store(settings)


def test_cosmos_requires_database_name(settings):
    settings.COSMOS_CONNECTION_STRING = "AccountEndpoint=https://example.documents.azure.com:443/;AccountKey=a2V5;"
    settings.COSMOS_DATABASE_NAME = ""
    with pytest.raises(ConfigurationException):
        BackendFactory.create_document_store(settings)
