from .base_repository import BaseRepository
from .post_repository import PostRepository, POSTS_COLLECTION

__all__ = [
    "BaseRepository",
    "PostRepository",
    "POSTS_COLLECTION"
]
