from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from markupsafe import Markup
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from cineblog.core.interfaces import Document

TITLE_MIN_LENGTH = 3
CONTENT_MIN_LENGTH = 50
MAX_BANNER_BYTES = 4 * 1024 * 1024
EXCERPT_LENGTH = 150


def to_iso_timestamp(moment: datetime) -> str:
    """UTC ISO-8601 with milliseconds and a trailing Z, e.g. 2025-09-10T12:00:00.000Z"""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class BannerUpload(BaseModel):
    """Raw banner file as received from the form"""
    filename: str
    content_type: Optional[str] = None
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class PostCreate(BaseModel):
    """Validated fields of the create-post form"""
    title: str = ""
    content: str = ""
    banner: Optional[BannerUpload] = None
    movie_api_id: Optional[int] = Field(None, alias="movieApiId")
    movie_title: Optional[str] = Field(None, alias="movieTitle")
    movie_poster_url: Optional[str] = Field(None, alias="moviePosterUrl")
    movie_release_date: Optional[str] = Field(None, alias="movieReleaseDate")

    class Config:
        populate_by_name = True

    @field_validator("title", "content", mode="before")
    @classmethod
    def missing_text_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("title")
    @classmethod
    def title_min_length(cls, v: str) -> str:
        v = v.strip()
        if len(v) < TITLE_MIN_LENGTH:
            raise PydanticCustomError(
                "title_too_short", f"Title must be at least {TITLE_MIN_LENGTH} characters long."
            )
        return v

    @field_validator("content")
    @classmethod
    def content_min_length(cls, v: str) -> str:
        if len(v) < CONTENT_MIN_LENGTH:
            raise PydanticCustomError(
                "content_too_short", f"Content must be at least {CONTENT_MIN_LENGTH} characters long."
            )
        return v

    @field_validator("banner")
    @classmethod
    def banner_size(cls, v: Optional[BannerUpload]) -> Optional[BannerUpload]:
        if v is None or v.size == 0:
            return None
        if v.size >= MAX_BANNER_BYTES:
            raise PydanticCustomError("banner_too_large", "Max image size is 4MB.")
        return v

    @field_validator("movie_api_id", mode="before")
    @classmethod
    def parse_movie_id(cls, v: Any) -> Optional[int]:
        if v is None or isinstance(v, int):
            return v
        v = str(v).strip()
        if not v:
            return None
        if not v.isdigit():
            raise PydanticCustomError("movie_id", "Movie id must be a number.")
        return int(v)

    @field_validator("movie_title", "movie_poster_url", "movie_release_date", mode="before")
    @classmethod
    def blank_is_absent(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    def movie_snapshot(self) -> Dict[str, Any]:
        """Movie fields that were actually supplied, keyed as stored"""
        return self.model_dump(
            by_alias=True,
            include={"movie_api_id", "movie_title", "movie_poster_url", "movie_release_date"},
            exclude_none=True,
        )


def flatten_errors(exc: ValidationError) -> Dict[str, List[str]]:
    """Group pydantic errors by form field name"""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "form"
        errors.setdefault(field, []).append(error["msg"])
    return errors


class CreatePostState(BaseModel):
    """Field-level errors plus an overall status message for one submission"""
    errors: Dict[str, List[str]] = Field(default_factory=dict)
    message: Optional[str] = None

    def first_error(self, field: str) -> Optional[str]:
        messages = self.errors.get(field)
        return messages[0] if messages else None


class Post(BaseModel):
    id: str
    created_at: str = Field(alias="createdAt")
    title: str
    slug: str
    content: str = ""
    banner_url: str = Field("", alias="bannerUrl")
    movie_api_id: Optional[int] = Field(None, alias="movieApiId")
    movie_title: Optional[str] = Field(None, alias="movieTitle")
    movie_poster_url: Optional[str] = Field(None, alias="moviePosterUrl")
    movie_release_date: Optional[str] = Field(None, alias="movieReleaseDate")

    class Config:
        populate_by_name = True

    @classmethod
    def from_document(cls, document: Document) -> "Post":
        return cls.model_validate({**document.data, "id": document.id})

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude={"id"}, exclude_none=True)

    @property
    def has_movie(self) -> bool:
        return self.movie_api_id is not None

    @property
    def published_on(self) -> str:
        try:
            moment = datetime.fromisoformat(self.created_at.replace("Z", "+00:00"))
        except ValueError:
            return self.created_at
        return f"{moment:%B} {moment.day}, {moment.year}"

    def excerpt(self, length: int = EXCERPT_LENGTH) -> str:
        text = Markup(self.content).striptags()
        if len(text) > length:
            return text[:length] + "..."
        return text
