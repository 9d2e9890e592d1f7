from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

@dataclass
class TMDBConfig:
    """Configuration class for TMDB API"""
    api_key: str
    base_url: str = "https://api.themoviedb.org/3"
    language: str = "en-US"
    timeout: int = 10
    max_retries: int = 0

class TMDBResponse:
    """Response wrapper for TMDB API calls"""
    def __init__(self, data: Dict, status_code: int, success: bool):
        self.data = data
        self.status_code = status_code
        self.success = success

class TMDBError(Exception):
    """Custom exception for TMDB API errors"""
    def __init__(self, message: str, status_code: int = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

class TMDBClientInterface(ABC):
    """Abstract interface for TMDB client"""

    @abstractmethod
    def make_request(self, endpoint: str, params: Dict = None) -> TMDBResponse:
        pass

    def close(self) -> None:
        pass

class MovieServiceInterface(ABC):
    """Abstract interface for movie service"""

    @abstractmethod
    def search_movies(self, query: str, page: int = 1) -> TMDBResponse:
        pass

    @abstractmethod
    def get_movie_details(self, movie_id: int) -> TMDBResponse:
        pass

    def close(self) -> None:
        pass

@dataclass
class Document:
    """A stored document: store-assigned id plus its fields"""
    id: str
    data: Dict[str, Any] = field(default_factory=dict)

class DocumentStoreInterface(ABC):
    """Abstract interface for a collection-oriented document store"""

    @abstractmethod
    def find_one(self, collection: str, field_name: str, value: Any) -> Optional[Document]:
        """Return the first document whose field equals value, or None"""
        pass

    @abstractmethod
    def find_all(self, collection: str, order_by: Optional[str] = None, descending: bool = False) -> List[Document]:
        pass

    @abstractmethod
    def add(self, collection: str, data: Dict[str, Any]) -> Document:
        """Insert a new document under a generated id"""
        pass

    def close(self) -> None:
        pass

class ObjectStoreInterface(ABC):
    """Abstract interface for blob storage with public URLs"""

    @abstractmethod
    def save(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        """Store bytes under path and return the public URL"""
        pass
