"""
Movies service for the Movie Catalog.
"""

from fastapi import Query

from shared.base_service import BaseService
from shared.deadline import run_with_deadline
from shared.observability import OperationObserver
from shared.tracing import get_tracer

from .cache.redis_cache import MovieCache
from .catalog.base import MovieCatalog
from .catalog.instrumented import InstrumentedMovieCatalog
from .catalog.service import MovieCatalogService
from .models import (
    DEFAULT_PAGE, ListingQuery, Movie,
    MovieCreateRequest, MovieUpdateRequest, MovieResponse, MovieListResponse,
    DeleteMovieResponse
)
from .persistence.postgres import MovieRepository


class MoviesService(BaseService):
    """Movies service implementation."""

    def __init__(self):
        super().__init__("movies", 8020)

        # Initialize components
        self.repository = MovieRepository(
            self.config.postgres_dsn,
            min_pool_size=self.config.postgres_min_pool_size,
            max_pool_size=self.config.postgres_max_pool_size,
            command_timeout=self.config.postgres_command_timeout,
        )
        self.cache = MovieCache(
            self.config.redis_url,
            self.config.cache_ttl_seconds,
            metrics=self.metrics,
        )
        self.observer = OperationObserver(
            get_tracer(self.tracer_provider, "movies.catalog"),
            self.metrics,
        )
        self.catalog: MovieCatalog = InstrumentedMovieCatalog(
            MovieCatalogService(
                self.repository,
                self.cache,
                fail_open=self.config.cache_fail_open,
                default_page_size=self.config.default_page_size,
            ),
            self.observer,
        )

        self._setup_movies_routes()

    def _setup_movies_routes(self):
        """Set up movie-specific routes."""
        timeout = self.config.request_timeout_seconds

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "movies",
                "message": "Movie Catalog - Movies Service",
                "version": "1.0.0",
                "capabilities": ["catalog", "caching", "persistence"]
            }

        @self.app.post("/movies", response_model=MovieResponse, status_code=201)
        async def create_movie(request: MovieCreateRequest):
            """Create a movie."""
            movie = Movie(id="", title=request.title, genre=request.genre)
            created = await run_with_deadline(self.catalog.create_movie(movie), timeout)
            return MovieResponse.from_movie(created)

        @self.app.get("/movies", response_model=MovieListResponse)
        async def get_movies(
            page: int = Query(DEFAULT_PAGE, description="Page number, 1-based"),
            page_size: int = Query(self.config.default_page_size, description="Items per page"),
            search: str = Query("", description="Case-insensitive title/genre filter")
        ):
            """List movies with pagination and search."""
            query = ListingQuery(page=page, page_size=page_size, search=search)
            result = await run_with_deadline(self.catalog.get_movies(query), timeout)
            clamped = query.clamped(self.config.default_page_size)
            return MovieListResponse(
                movies=[MovieResponse.from_movie(movie) for movie in result.movies],
                total_records=result.total_records,
                page=clamped.page,
                page_size=clamped.page_size
            )

        @self.app.get("/movies/{movie_id}", response_model=MovieResponse)
        async def get_movie(movie_id: str):
            """Get a movie by id."""
            movie = await run_with_deadline(self.catalog.get_movie(movie_id), timeout)
            return MovieResponse.from_movie(movie)

        @self.app.put("/movies/{movie_id}", response_model=MovieResponse)
        async def update_movie(movie_id: str, request: MovieUpdateRequest):
            """Update a movie's title and/or genre."""
            movie = Movie(id=movie_id, title=request.title or "", genre=request.genre or "")
            updated = await run_with_deadline(self.catalog.update_movie(movie), timeout)
            return MovieResponse.from_movie(updated)

        @self.app.delete("/movies/{movie_id}", response_model=DeleteMovieResponse)
        async def delete_movie(movie_id: str):
            """Delete a movie."""
            await run_with_deadline(self.catalog.delete_movie(movie_id), timeout)
            return DeleteMovieResponse(success=True)

    async def _check_dependencies(self):
        """Check movies service dependencies."""
        return {
            "redis": "ok" if await self.cache.health_check() else "error",
            "postgres": "ok" if await self.repository.health_check() else "error",
        }

    async def start(self):
        """Start movies service components."""
        await self.repository.start()
        await self.cache.start()
        self.logger.info("Movies service started")

    async def stop(self):
        """Stop movies service components."""
        await self.cache.stop()
        await self.repository.stop()
        self.logger.info("Movies service stopped")


def create_app():
    """Create movies service application."""
    service = MoviesService()
    service.app.state.movies_service = service
    return service.app


if __name__ == "__main__":
    service = MoviesService()
    service.run()
