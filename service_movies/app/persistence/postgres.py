"""
PostgreSQL persistence layer for the Movies Service.
"""

import uuid
from typing import Callable, List, Optional, Tuple

import asyncpg

from shared.errors import NotFoundError, NotPersistedError, ServiceError
from shared.logging import get_logger
from ..models import DEFAULT_PAGE_SIZE, ListingQuery, Movie, MovieListResult

# LIMIT and OFFSET are bound as int8
PG_BIGINT_MAX = 2 ** 63 - 1


def _new_movie_id() -> str:
    return str(uuid.uuid4())


def _rows_affected(status: str) -> int:
    """Row count from an asyncpg command tag such as ``DELETE 1`` or ``INSERT 0 1``."""
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (AttributeError, ValueError):
        return 0


def _like_pattern(search: str) -> str:
    """Case-insensitive substring pattern with LIKE wildcards escaped."""
    escaped = search.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class MovieRepository:
    """PostgreSQL store for movies. The table is the single source of truth."""

    def __init__(
        self,
        dsn: str,
        *,
        min_pool_size: int = 2,
        max_pool_size: int = 10,
        command_timeout: float = 30.0,
        id_factory: Callable[[], str] = _new_movie_id,
    ):
        self.dsn = dsn
        self.min_pool_size = min_pool_size
        self.max_pool_size = max_pool_size
        self.command_timeout = command_timeout
        self.id_factory = id_factory
        self.logger = get_logger("movies.persistence.postgres")
        self.pool: Optional[asyncpg.Pool] = None

    async def start(self):
        """Start the persistence layer."""
        try:
            self.pool = await asyncpg.create_pool(
                self.dsn,
                min_size=self.min_pool_size,
                max_size=self.max_pool_size,
                command_timeout=self.command_timeout
            )

            # Create tables if they don't exist
            await self._create_tables()

            self.logger.info("PostgreSQL persistence started")

        except (asyncpg.PostgresError, OSError) as e:
            self.logger.error("Failed to start PostgreSQL persistence", error=str(e))
            raise ServiceError(f"PostgreSQL start failed: {e}") from e

    async def stop(self):
        """Stop the persistence layer."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            self.logger.info("PostgreSQL persistence stopped")

    async def _create_tables(self):
        """Create database tables."""
        async with self.pool.acquire() as conn:
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS movies (
                    id VARCHAR(36) PRIMARY KEY,
                    title TEXT NOT NULL,
                    genre TEXT NOT NULL DEFAULT '',
                    created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW(),
                    updated_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW()
                );
            """)
            await conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_movies_created ON movies(created_at, id);
            """)

    async def create_movie(self, movie: Movie) -> Movie:
        """Insert a movie under a freshly generated id, ignoring any id supplied."""
        created = movie.with_id(self.id_factory())

        async with self.pool.acquire() as conn:
            status = await conn.execute("""
                INSERT INTO movies (id, title, genre) VALUES ($1, $2, $3)
            """, created.id, created.title, created.genre)

        if _rows_affected(status) == 0:
            self.logger.error("Movie insert affected no rows", title=created.title)
            raise NotPersistedError("movie creation unsuccessful")

        self.logger.info("Movie created", movie_id=created.id)
        return created

    async def get_movie(self, movie_id: str) -> Movie:
        """Load a movie by id."""
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow("""
                SELECT id, title, genre FROM movies WHERE id = $1
            """, movie_id)

        if not row:
            raise NotFoundError("movie not found", details={"id": movie_id})

        return self._row_to_movie(row)

    async def get_movies(self, page: int, page_size: int, search: str = "") -> MovieListResult:
        """Load one page of movies matching ``search`` in title or genre.

        The total is counted over the same filter, ignoring pagination. An
        empty page, including any page past the last, raises NotFoundError.
        """
        query = ListingQuery(page=page, page_size=page_size, search=search).clamped(DEFAULT_PAGE_SIZE)
        not_found_details = {"page": query.page, "page_size": query.page_size, "search": query.search}
        if query.offset > PG_BIGINT_MAX:
            raise NotFoundError("movies not found", details=not_found_details)
        limit = min(query.page_size, PG_BIGINT_MAX)

        where_clause, params = self._search_filter(query.search)
        count_sql = f"SELECT COUNT(*) FROM movies{where_clause}"
        limit_index = len(params) + 1
        page_sql = (
            f"SELECT id, title, genre FROM movies{where_clause} "
            f"ORDER BY created_at ASC, id ASC LIMIT ${limit_index} OFFSET ${limit_index + 1}"
        )

        async with self.pool.acquire() as conn:
            # Count and page come from one snapshot
            async with conn.transaction(isolation="repeatable_read", readonly=True):
                total_records = await conn.fetchval(count_sql, *params)
                rows = await conn.fetch(page_sql, *params, limit, query.offset)

        if not rows:
            raise NotFoundError("movies not found", details=not_found_details)

        return MovieListResult(
            movies=[self._row_to_movie(row) for row in rows],
            total_records=int(total_records or 0),
        )

    async def update_movie(self, movie: Movie) -> Movie:
        """Update title and genre; empty values leave the stored value unchanged."""
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow("""
                UPDATE movies SET
                    title = COALESCE(NULLIF($2, ''), title),
                    genre = COALESCE(NULLIF($3, ''), genre),
                    updated_at = NOW()
                WHERE id = $1
                RETURNING id, title, genre
            """, movie.id, movie.title or "", movie.genre or "")

        if not row:
            raise NotFoundError("movie not found", details={"id": movie.id})

        self.logger.info("Movie updated", movie_id=movie.id)
        return self._row_to_movie(row)

    async def delete_movie(self, movie_id: str) -> None:
        """Physically delete a movie."""
        async with self.pool.acquire() as conn:
            status = await conn.execute("""
                DELETE FROM movies WHERE id = $1
            """, movie_id)

        if _rows_affected(status) == 0:
            self.logger.warning("Movie not found for deletion", movie_id=movie_id)
            raise NotFoundError("movie not found", details={"id": movie_id})

        self.logger.info("Movie deleted", movie_id=movie_id)

    async def health_check(self) -> bool:
        """Check database health."""
        if self.pool is None:
            return False
        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
                return True
        except (asyncpg.PostgresError, OSError) as e:
            self.logger.error("PostgreSQL health check failed", error=str(e))
            return False

    def _search_filter(self, search: str) -> Tuple[str, List[str]]:
        """WHERE clause and parameters for the search predicate; empty search filters nothing."""
        if not search:
            return "", []
        return " WHERE LOWER(title) LIKE $1 OR LOWER(genre) LIKE $1", [_like_pattern(search)]

    def _row_to_movie(self, row) -> Movie:
        """Convert database row to Movie object."""
        return Movie(id=row["id"], title=row["title"], genre=row["genre"])
