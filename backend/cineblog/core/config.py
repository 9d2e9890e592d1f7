import os
from typing import Optional
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings using Pydantic BaseSettings"""

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    DEBUG: bool = os.getenv("DEBUG", "True").lower() == "true"
    LOG_LEVEL: str = "INFO"

    # Document store (SQL fallback unless Cosmos is configured)
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./cineblog.db")
    COSMOS_CONNECTION_STRING: Optional[str] = None
    COSMOS_DATABASE_NAME: str = "cineblog"

    # Object store (local media directory unless Azure Blob is configured)
    AZURE_STORAGE_CONNECTION_STRING: Optional[str] = None
    AZURE_STORAGE_CONTAINER: str = "media"
    MEDIA_ROOT: str = os.getenv("MEDIA_ROOT", "./media")
    MEDIA_URL: str = "/media"

    # TMDB
    TMDB_API_KEY: Optional[str] = os.getenv("TMDB_API_KEY")
    TMDB_BASE_URL: str = "https://api.themoviedb.org/3"
    TMDB_IMAGE_BASE_URL: str = "https://image.tmdb.org/t/p"
    TMDB_LANGUAGE: str = "en-US"
    TMDB_TIMEOUT: int = 10
    TMDB_MAX_RETRIES: int = 0

    # Cache (empty REDIS_URL disables caching)
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    LISTING_CACHE_TTL_SECONDS: int = 300

    # Site
    CORS_ALLOW_ORIGINS: Optional[str] = None
    AUTHOR_NAME: str = "Livya"
    SITE_TAGLINE: str = "Thoughts, stories, and movie reviews"

    class Config:
        env_file = ".env"
        case_sensitive = True

# Singleton instance
_settings: Optional[Settings] = None

def get_settings() -> Settings:
    """Get settings singleton instance"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
