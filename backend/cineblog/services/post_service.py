import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from fastapi import status
from pydantic import ValidationError

from cineblog.core.cache import CacheService
from cineblog.core.exceptions import DocumentStoreException, ObjectStoreException
from cineblog.core.interfaces import ObjectStoreInterface
from cineblog.core.slugs import slugify
from cineblog.repositories.post_repository import PostRepository
from cineblog.schemas.post import (
    BannerUpload, CreatePostState, Post, PostCreate, flatten_errors, to_iso_timestamp
)

logger = logging.getLogger(__name__)

LISTING_CACHE_KEY = "page:/blog"
BANNER_PREFIX = "blog-banners"
_WHITESPACE = re.compile(r"\s")

VALIDATION_FAILED_MESSAGE = "Missing or invalid fields. Failed to create post."
UPLOAD_FAILED_MESSAGE = "Storage Error: Failed to upload banner image."
PERSIST_FAILED_MESSAGE = "Database Error: Failed to create post."
CREATED_MESSAGE = "Success! Your post has been published."


def banner_object_name(filename: str, moment: datetime) -> str:
    """blog-banners/<epoch-millis>-<filename with whitespace as underscores>"""
    basename = filename.replace("\\", "/").rsplit("/", 1)[-1]
    millis = int(moment.timestamp() * 1000)
    return f"{BANNER_PREFIX}/{millis}-{_WHITESPACE.sub('_', basename)}"


@dataclass
class CreatePostResult:
    """Outcome of one submission: a redirect target or the form state to re-render"""
    state: CreatePostState
    status_code: int
    redirect_to: Optional[str] = None
    post: Optional[Post] = None

    @property
    def success(self) -> bool:
        return self.redirect_to is not None


class PostService:
    """Validates, uploads, persists and publishes new posts"""

    def __init__(
        self,
        repository: PostRepository,
        object_store: ObjectStoreInterface,
        cache: CacheService,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.repository = repository
        self.object_store = object_store
        self.cache = cache
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def upload_banner(self, banner: BannerUpload, moment: datetime) -> str:
        """Store the banner and return its public URL"""
        path = banner_object_name(banner.filename, moment)
        return self.object_store.save(path, banner.data, banner.content_type)

    def create_post(self, fields: Dict[str, Any]) -> CreatePostResult:
        """Create a post from raw form fields.

        Nothing is uploaded or written unless every field validates. A
        failed insert after a successful upload leaves the banner behind.
        """
        try:
            form = PostCreate.model_validate(fields)
        except ValidationError as e:
            errors = flatten_errors(e)
            logger.info(f"Rejected post submission, invalid fields: {sorted(errors)}")
            return CreatePostResult(
                CreatePostState(errors=errors, message=VALIDATION_FAILED_MESSAGE),
                status.HTTP_400_BAD_REQUEST,
            )

        now = self.clock()
        banner_url = ""
        if form.banner is not None:
            try:
                banner_url = self.upload_banner(form.banner, now)
            except ObjectStoreException as e:
                logger.error(f"Storage Error: {e.message}")
                return CreatePostResult(CreatePostState(message=UPLOAD_FAILED_MESSAGE), e.status_code)

        slug = slugify(form.title)
        document = {
            "title": form.title,
            "slug": slug,
            "content": form.content,
            "bannerUrl": banner_url,
            "createdAt": to_iso_timestamp(now),
            **form.movie_snapshot(),
        }

        try:
            post = self.repository.create_post(document)
        except DocumentStoreException as e:
            logger.error(f"Database Error: {e.message}")
            if banner_url:
                logger.warning(f"Banner {banner_url} has no post referencing it")
            return CreatePostResult(CreatePostState(message=PERSIST_FAILED_MESSAGE), e.status_code)

        self.cache.delete(LISTING_CACHE_KEY)
        logger.info(f"Created post {post.id} with slug '{slug}'")
        return CreatePostResult(
            CreatePostState(message=CREATED_MESSAGE),
            status.HTTP_303_SEE_OTHER,
            redirect_to=f"/blog/{slug}",
            post=post,
        )
