import logging
from enum import Enum
from typing import Callable, List, Optional

from cineblog.core.exceptions import MovieLookupException
from cineblog.schemas.movie import MovieSearchResult
from cineblog.services.movie_lookup_service import MIN_QUERY_LENGTH

logger = logging.getLogger(__name__)


class SearchState(str, Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    RESULTS = "results"
    NO_RESULTS = "no_results"
    ERROR = "error"


class MovieSearchBox:
    """State of the movie combo box on the create form.

    Every query change, clear or selection bumps ``generation``; a response
    is only applied when it carries the current generation, so a slow
    earlier search can never overwrite a later one.
    ``static/js/movie_search.js`` implements the same machine in the browser.
    """

    def __init__(self):
        self.state = SearchState.IDLE
        self.query = ""
        self.generation = 0
        self.results: List[MovieSearchResult] = []
        self.selected: Optional[MovieSearchResult] = None

    def update_query(self, query: str) -> Optional[int]:
        """Record a new query; return the generation token to search with, or None"""
        self.query = query
        self.selected = None
        self.generation += 1
        if len(query.strip()) < MIN_QUERY_LENGTH:
            self.results = []
            self.state = SearchState.IDLE
            return None
        self.state = SearchState.SEARCHING
        return self.generation

    def apply_results(self, token: int, results: List[MovieSearchResult]) -> bool:
        if token != self.generation or self.state != SearchState.SEARCHING:
            logger.debug(f"Dropping stale search results (token {token}, current {self.generation})")
            return False
        self.results = list(results)
        self.state = SearchState.RESULTS if self.results else SearchState.NO_RESULTS
        return True

    def apply_error(self, token: int) -> bool:
        if token != self.generation or self.state != SearchState.SEARCHING:
            return False
        self.results = []
        self.state = SearchState.ERROR
        return True

    def select(self, movie: MovieSearchResult) -> None:
        self.selected = movie
        self.query = movie.title
        self.results = []
        self.generation += 1
        self.state = SearchState.IDLE

    def clear(self) -> None:
        self.query = ""
        self.selected = None
        self.results = []
        self.generation += 1
        self.state = SearchState.IDLE

    def run_search(self, query: str, search: Callable[[str], List[MovieSearchResult]]) -> SearchState:
        """Drive one synchronous search through the machine"""
        token = self.update_query(query)
        if token is None:
            return self.state
        try:
            results = search(query)
        except MovieLookupException as e:
            logger.error(f"Movie search failed: {e.message}")
            self.apply_error(token)
        else:
            self.apply_results(token, results)
        return self.state

    def select_by_id(self, movie_id: int) -> bool:
        """Select one of the current results by TMDB id"""
        for movie in self.results:
            if movie.id == movie_id:
                self.select(movie)
                return True
        return False
