from fastapi import APIRouter, Depends, HTTPException, status, Query

from cineblog.core.container import get_movie_lookup
from cineblog.core.exceptions import BaseAppException
from cineblog.schemas.movie import MovieDetails, MovieSearchResponse
from cineblog.services.movie_lookup_service import MovieLookupService

router = APIRouter(prefix="/api/movies", tags=["movies"])

def handle_exception(e: Exception) -> HTTPException:
    if isinstance(e, BaseAppException):
        return HTTPException(
            status_code=e.status_code,
            detail=e.message
        )
    else:
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An internal server error occurred"
        )

@router.get("/search", response_model=MovieSearchResponse)
def search_movies(
    query: str = Query("", description="Partial movie title, at least 3 characters"),
    lookup: MovieLookupService = Depends(get_movie_lookup)
):
    # Never fails: lookup errors come back as an empty result list
    return MovieSearchResponse(query=query, results=lookup.search(query))

@router.get("/{movie_id}/details", response_model=MovieDetails)
def get_movie_details(
    movie_id: int,
    lookup: MovieLookupService = Depends(get_movie_lookup)
):
    try:
        return lookup.get_details(movie_id)
    except Exception as e:
        raise handle_exception(e)
