from pydantic import BaseModel, Field
from typing import Optional, List

DEFAULT_IMAGE_BASE_URL = "https://image.tmdb.org/t/p"
SEARCH_RESULT_LIMIT = 5
CAST_LIMIT = 6

# TMDB Response Schemas
class MovieSearchResult(BaseModel):
    """One hit from TMDB's movie search"""
    id: int
    title: str
    release_date: Optional[str] = ""
    poster_path: Optional[str] = None

    @property
    def year(self) -> str:
        return (self.release_date or "").split("-")[0]

    def poster_url(self, size: str = "w500", base_url: str = DEFAULT_IMAGE_BASE_URL) -> str:
        if not self.poster_path:
            return ""
        return f"{base_url}/{size}{self.poster_path}"

class CastMember(BaseModel):
    name: str
    character: Optional[str] = None
    profile_path: Optional[str] = None

class Genre(BaseModel):
    id: int
    name: str

class MovieDetails(BaseModel):
    """Details overlay payload: synopsis, top cast, director and genres"""
    overview: str = ""
    cast: List[CastMember] = Field(default_factory=list)
    director: str = "N/A"
    genres: List[Genre] = Field(default_factory=list)

class MovieSearchResponse(BaseModel):
    query: str
    results: List[MovieSearchResult]
