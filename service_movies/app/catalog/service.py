"""
Movie catalog service coordinating the Redis cache and the PostgreSQL store.
"""

from typing import Any, Awaitable, Optional, TypeVar

from shared.errors import CacheUnavailableError
from shared.logging import get_logger
from .base import MovieCatalog
from ..cache.keys import movie_list_key
from ..cache.redis_cache import MovieCache
from ..models import DEFAULT_PAGE_SIZE, ListingQuery, Movie, MovieListResult
from ..persistence.postgres import MovieRepository

T = TypeVar("T")


class MovieCatalogService(MovieCatalog):
    """Cache-aside reads with invalidation on writes.

    Listings and single movies are read from the cache first and populated
    on a miss. Update and delete drop the single-movie entry only: listing
    snapshots are left to expire with their TTL, so paginated and search
    views may lag a mutation by up to one TTL window. The single-movie
    populate on a GetMovie miss is not ordered against a concurrent
    UpdateMovie/DeleteMovie: a read that fetched the old row can write it
    back after the invalidation, leaving a stale entry for up to one TTL.

    With ``fail_open`` (the default) a cache failure on read counts as a
    miss and a failure on populate/invalidate is logged and swallowed. With
    ``fail_open=False`` every CacheUnavailableError reaches the caller.
    Store errors always propagate unchanged.
    """

    def __init__(
        self,
        repository: MovieRepository,
        cache: MovieCache,
        *,
        fail_open: bool = True,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        logger: Optional[Any] = None,
    ):
        self.repository = repository
        self.cache = cache
        self.fail_open = fail_open
        self.default_page_size = default_page_size
        self.logger = logger or get_logger("movies.catalog")

    async def create_movie(self, movie: Movie) -> Movie:
        # Populated lazily by the next get_movie miss
        return await self.repository.create_movie(movie)

    async def get_movie(self, movie_id: str) -> Movie:
        cached = await self._cache_read(self.cache.get_movie(movie_id), key=movie_id)
        if cached is not None:
            return cached

        movie = await self.repository.get_movie(movie_id)
        await self._cache_write(self.cache.set_movie(movie), action="populate", key=movie_id)
        return movie

    async def get_movies(self, query: ListingQuery) -> MovieListResult:
        query = query.clamped(self.default_page_size)
        cache_key = movie_list_key(query.page, query.page_size, query.search)

        cached = await self._cache_read(self.cache.get_movie_list(cache_key), key=cache_key)
        if cached is not None:
            return cached

        result = await self.repository.get_movies(query.page, query.page_size, query.search)
        await self._cache_write(self.cache.set_movie_list(cache_key, result), action="populate", key=cache_key)
        return result

    async def update_movie(self, movie: Movie) -> Movie:
        updated = await self.repository.update_movie(movie)
        await self._cache_write(self.cache.delete_movie(movie.id), action="invalidate", key=movie.id)
        return updated

    async def delete_movie(self, movie_id: str) -> None:
        await self.repository.delete_movie(movie_id)
        await self._cache_write(self.cache.delete_movie(movie_id), action="invalidate", key=movie_id)

    async def _cache_read(self, lookup: Awaitable[Optional[T]], *, key: str) -> Optional[T]:
        """Await a cache lookup; a failure becomes a miss when failing open."""
        try:
            return await lookup
        except CacheUnavailableError as exc:
            if not self.fail_open:
                raise
            self.logger.warning("Cache read failed, reading from store", cache_key=key, error=exc.message)
            return None

    async def _cache_write(self, write: Awaitable[None], *, action: str, key: str) -> None:
        """Await a cache populate/invalidate; a failure is logged and dropped when failing open."""
        try:
            await write
        except CacheUnavailableError as exc:
            if not self.fail_open:
                raise
            self.logger.warning(f"Cache {action} failed", cache_key=key, error=exc.message)
