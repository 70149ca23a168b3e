"""
Unit tests for the PostgreSQL movie repository.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from shared.errors import NotFoundError, NotPersistedError
from service_movies.app.models import Movie
from service_movies.app.persistence.postgres import PG_BIGINT_MAX, MovieRepository


class TestMovieRepository:
    """Test cases for MovieRepository."""

    @pytest.fixture
    def conn(self):
        """Mock asyncpg connection."""
        conn = AsyncMock()
        conn.transaction = MagicMock()
        return conn

    @pytest.fixture
    def repository(self, conn):
        """Create MovieRepository over a mocked pool."""
        repository = MovieRepository("postgresql://localhost/movies", id_factory=lambda: "generated-id")
        repository.pool = MagicMock()
        repository.pool.acquire.return_value.__aenter__.return_value = conn
        return repository

    @pytest.mark.asyncio
    async def test_create_overwrites_caller_id(self, repository, conn):
        conn.execute.return_value = "INSERT 0 1"

        created = await repository.create_movie(Movie(id="mine", title="Dune", genre="Sci-Fi"))

        assert created == Movie(id="generated-id", title="Dune", genre="Sci-Fi")
        args = conn.execute.call_args.args
        assert args[1:] == ("generated-id", "Dune", "Sci-Fi")

    @pytest.mark.asyncio
    async def test_create_with_no_rows_written_is_not_persisted(self, repository, conn):
        conn.execute.return_value = "INSERT 0 0"

        with pytest.raises(NotPersistedError):
            await repository.create_movie(Movie(id="", title="Dune"))

    @pytest.mark.asyncio
    async def test_get_movie(self, repository, conn):
        conn.fetchrow.return_value = {"id": "m1", "title": "Dune", "genre": "Sci-Fi"}

        movie = await repository.get_movie("m1")

        assert movie == Movie(id="m1", title="Dune", genre="Sci-Fi")
        assert conn.fetchrow.call_args.args[1] == "m1"

    @pytest.mark.asyncio
    async def test_get_movie_not_found(self, repository, conn):
        conn.fetchrow.return_value = None

        with pytest.raises(NotFoundError):
            await repository.get_movie("missing")

    @pytest.mark.asyncio
    async def test_get_movies_without_search_skips_filter(self, repository, conn):
        conn.fetchval.return_value = 3
        conn.fetch.return_value = [
            {"id": "m1", "title": "Dune", "genre": "Sci-Fi"},
            {"id": "m2", "title": "Arrival", "genre": "Sci-Fi"},
        ]

        result = await repository.get_movies(1, 2, "")

        assert result.total_records == 3
        assert [movie.id for movie in result.movies] == ["m1", "m2"]

        count_sql = conn.fetchval.call_args.args[0]
        assert "WHERE" not in count_sql
        page_args = conn.fetch.call_args.args
        assert "WHERE" not in page_args[0]
        assert "LIMIT $1 OFFSET $2" in page_args[0]
        assert page_args[1:] == (2, 0)

    @pytest.mark.asyncio
    async def test_get_movies_applies_same_filter_to_count_and_page(self, repository, conn):
        conn.fetchval.return_value = 12
        conn.fetch.return_value = [{"id": "m7", "title": "Dune", "genre": "Sci-Fi"}]

        result = await repository.get_movies(3, 5, "DuNe")

        assert result.total_records == 12
        count_args = conn.fetchval.call_args.args
        page_args = conn.fetch.call_args.args
        assert "LOWER(title) LIKE $1 OR LOWER(genre) LIKE $1" in count_args[0]
        assert "LOWER(title) LIKE $1 OR LOWER(genre) LIKE $1" in page_args[0]
        assert count_args[1] == "%dune%"
        assert page_args[1:] == ("%dune%", 5, 10)

    @pytest.mark.asyncio
    async def test_get_movies_escapes_like_wildcards(self, repository, conn):
        conn.fetchval.return_value = 1
        conn.fetch.return_value = [{"id": "m1", "title": "100%_Pure", "genre": ""}]

        await repository.get_movies(1, 10, "100%_")

        assert conn.fetchval.call_args.args[1] == "%100\\%\\_%"

    @pytest.mark.asyncio
    async def test_get_movies_page_beyond_last_is_not_found(self, repository, conn):
        conn.fetchval.return_value = 3
        conn.fetch.return_value = []

        with pytest.raises(NotFoundError):
            await repository.get_movies(99, 10, "")

        assert conn.fetch.call_args.args[1:] == (10, 980)

    @pytest.mark.asyncio
    async def test_get_movies_clamps_non_positive_paging(self, repository, conn):
        conn.fetchval.return_value = 1
        conn.fetch.return_value = [{"id": "m1", "title": "Dune", "genre": "Sci-Fi"}]

        await repository.get_movies(0, 0, "")

        assert conn.fetch.call_args.args[1:] == (10, 0)

    @pytest.mark.asyncio
    async def test_get_movies_reads_one_snapshot(self, repository, conn):
        conn.fetchval.return_value = 1
        conn.fetch.return_value = [{"id": "m1", "title": "Dune", "genre": "Sci-Fi"}]

        await repository.get_movies(1, 10, "")

        conn.transaction.assert_called_once_with(isolation="repeatable_read", readonly=True)

    @pytest.mark.asyncio
    async def test_update_movie_returns_new_state(self, repository, conn):
        conn.fetchrow.return_value = {"id": "m1", "title": "Dune", "genre": "Science Fiction"}

        updated = await repository.update_movie(Movie(id="m1", title="", genre="Science Fiction"))

        assert updated.genre == "Science Fiction"
        sql, *params = conn.fetchrow.call_args.args
        assert "COALESCE(NULLIF($2, ''), title)" in sql
        assert params == ["m1", "", "Science Fiction"]

    @pytest.mark.asyncio
    async def test_update_missing_movie_is_not_found(self, repository, conn):
        conn.fetchrow.return_value = None

        with pytest.raises(NotFoundError):
            await repository.update_movie(Movie(id="missing", title="X"))

    @pytest.mark.asyncio
    async def test_delete_movie(self, repository, conn):
        conn.execute.return_value = "DELETE 1"

        await repository.delete_movie("m1")

        assert conn.execute.call_args.args[1] == "m1"

    @pytest.mark.asyncio
    async def test_delete_missing_movie_is_not_found(self, repository, conn):
        conn.execute.return_value = "DELETE 0"

        with pytest.raises(NotFoundError):
            await repository.delete_movie("missing")

    @pytest.mark.asyncio
    async def test_health_check_without_pool(self):
        repository = MovieRepository("postgresql://localhost/movies")

        assert await repository.health_check() is False

    @pytest.mark.asyncio
    async def test_get_movies_offset_beyond_bigint_is_not_found(self, repository, conn):
        with pytest.raises(NotFoundError):
            await repository.get_movies(10 ** 20, 10, "")

        conn.fetch.assert_not_called()
        conn.fetchval.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_movies_caps_limit_to_bigint(self, repository, conn):
        conn.fetchval.return_value = 1
        conn.fetch.return_value = [{"id": "m1", "title": "Dune", "genre": "Sci-Fi"}]

        await repository.get_movies(1, 10 ** 20, "")

        assert conn.fetch.call_args.args[1:] == (PG_BIGINT_MAX, 0)
