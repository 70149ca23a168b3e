"""
Operation contract shared by every movie catalog implementation.
"""

from abc import ABC, abstractmethod

from ..models import ListingQuery, Movie, MovieListResult


class MovieCatalog(ABC):
    """Create, get, list, update and delete movies.

    Implementations must supply all five operations; there is no fallback
    for a missing one.
    """

    @abstractmethod
    async def create_movie(self, movie: Movie) -> Movie:
        """Persist a new movie; the returned copy carries the assigned id."""

    @abstractmethod
    async def get_movie(self, movie_id: str) -> Movie:
        """Return one movie or raise NotFoundError."""

    @abstractmethod
    async def get_movies(self, query: ListingQuery) -> MovieListResult:
        """Return one page of movies and the filtered total."""

    @abstractmethod
    async def update_movie(self, movie: Movie) -> Movie:
        """Update title/genre of an existing movie and return its new state."""

    @abstractmethod
    async def delete_movie(self, movie_id: str) -> None:
        """Delete a movie or raise NotFoundError."""
