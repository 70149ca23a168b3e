"""
Tracing, logging and metrics around every catalog operation.
"""

from shared.observability import OperationObserver
from .base import MovieCatalog
from ..models import ListingQuery, Movie, MovieListResult


class InstrumentedMovieCatalog(MovieCatalog):
    """Decorates another catalog; each call gets a span, a log line and metrics."""

    def __init__(self, inner: MovieCatalog, observer: OperationObserver):
        self.inner = inner
        self.observer = observer

    async def create_movie(self, movie: Movie) -> Movie:
        async with self.observer.observe("CreateMovie", **{"movie.title": movie.title}) as span:
            created = await self.inner.create_movie(movie)
            span.set_attribute("movie.id", created.id)
            return created

    async def get_movie(self, movie_id: str) -> Movie:
        async with self.observer.observe("GetMovie", **{"movie.id": movie_id}):
            return await self.inner.get_movie(movie_id)

    async def get_movies(self, query: ListingQuery) -> MovieListResult:
        attributes = {
            "movies.page": query.page,
            "movies.page_size": query.page_size,
            "movies.search": query.search,
        }
        async with self.observer.observe("GetMovies", **attributes) as span:
            result = await self.inner.get_movies(query)
            span.set_attribute("movies.total_records", result.total_records)
            return result

    async def update_movie(self, movie: Movie) -> Movie:
        async with self.observer.observe("UpdateMovie", **{"movie.id": movie.id}):
            return await self.inner.update_movie(movie)

    async def delete_movie(self, movie_id: str) -> None:
        async with self.observer.observe("DeleteMovie", **{"movie.id": movie_id}):
            await self.inner.delete_movie(movie_id)
