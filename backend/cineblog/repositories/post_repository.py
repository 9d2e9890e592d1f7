import logging
from typing import Any, Dict, List, Optional
from cineblog.core.exceptions import DocumentStoreException
from cineblog.core.interfaces import DocumentStoreInterface
from cineblog.repositories.base_repository import BaseRepository
from cineblog.schemas.post import Post

logger = logging.getLogger(__name__)

POSTS_COLLECTION = "posts"

class PostRepository(BaseRepository[Post]):
    """Post queries over the ``posts`` collection"""

    def __init__(self, store: DocumentStoreInterface):
        super().__init__(Post, store, POSTS_COLLECTION)

    def fetch_post_by_slug(self, slug: str) -> Optional[Post]:
        """Get the post with this slug, or None.

        Slugs are not unique; with duplicates the store decides which one
        comes back. Backend failures raise DocumentStoreException.
        """
        try:
            post = self.get_one_by("slug", slug)
        except DocumentStoreException:
            logger.error(f"Database Error fetching post by slug: {slug}")
            raise
        if post is None:
            logger.info(f"No matching post found for slug: {slug}")
        return post

    def fetch_all_posts(self) -> List[Post]:
        """Get all posts, newest first"""
        try:
            return self.get_all(order_by="createdAt", descending=True)
        except DocumentStoreException:
            logger.error("Database Error fetching all posts")
            raise

    def create_post(self, data: Dict[str, Any]) -> Post:
        """Insert a post document"""
        return self.create(data)
