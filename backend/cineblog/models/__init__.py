from cineblog.db import Base
from .document import DocumentRecord

__all__ = ['Base', 'DocumentRecord']
