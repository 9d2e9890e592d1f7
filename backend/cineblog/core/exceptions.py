from fastapi import status

class BaseAppException(Exception):
    """Base exception for application"""
    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

    error_code = "INTERNAL_ERROR"

class PostNotFoundException(BaseAppException):
    """Raised when no post matches a slug"""
    error_code = "POST_NOT_FOUND"

    def __init__(self, message: str = "Post not found"):
        super().__init__(message, status.HTTP_404_NOT_FOUND)

class DocumentStoreException(BaseAppException):
    """Raised when the document store cannot be reached or rejects an operation"""
    error_code = "DOCUMENT_STORE_UNAVAILABLE"

    def __init__(self, message: str = "Document store unavailable"):
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE)

class ObjectStoreException(BaseAppException):
    """Raised when a blob upload fails"""
    error_code = "OBJECT_STORE_ERROR"

    def __init__(self, message: str = "Object store error"):
        super().__init__(message, status.HTTP_502_BAD_GATEWAY)

class MovieLookupException(BaseAppException):
    """Raised when TMDB lookups fail"""
    error_code = "MOVIE_LOOKUP_FAILED"

    def __init__(self, message: str = "Could not retrieve movie details."):
        super().__init__(message, status.HTTP_502_BAD_GATEWAY)

class ConfigurationException(BaseAppException):
    """Raised when a required setting is missing"""
    error_code = "CONFIGURATION_ERROR"

    def __init__(self, message: str = "Invalid configuration"):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)
