"""
Shared fixtures for Movies service tests.
"""

import json
from collections import Counter
from typing import Dict, List, Optional

import pytest

from shared.errors import CacheUnavailableError, NotFoundError
from service_movies.app.catalog.service import MovieCatalogService
from service_movies.app.models import ListingQuery, Movie, MovieListResult


class InMemoryMovieRepository:
    """Store double with the same contract as MovieRepository, counting calls."""

    def __init__(self):
        self.rows: Dict[str, Movie] = {}
        self.calls: Counter = Counter()
        self._next_id = 0

    async def create_movie(self, movie: Movie) -> Movie:
        self.calls["create_movie"] += 1
        self._next_id += 1
        created = movie.with_id(f"movie-{self._next_id}")
        self.rows[created.id] = created
        return created

    async def get_movie(self, movie_id: str) -> Movie:
        self.calls["get_movie"] += 1
        if movie_id not in self.rows:
            raise NotFoundError("movie not found")
        return self.rows[movie_id]

    async def get_movies(self, page: int, page_size: int, search: str = "") -> MovieListResult:
        self.calls["get_movies"] += 1
        query = ListingQuery(page, page_size, search).clamped()
        needle = query.search.lower()
        matches: List[Movie] = [
            movie for movie in self.rows.values()
            if not needle or needle in movie.title.lower() or needle in movie.genre.lower()
        ]
        rows = matches[query.offset:query.offset + query.page_size]
        if not rows:
            raise NotFoundError("movies not found")
        return MovieListResult(movies=rows, total_records=len(matches))

    async def update_movie(self, movie: Movie) -> Movie:
        self.calls["update_movie"] += 1
        current = self.rows.get(movie.id)
        if current is None:
            raise NotFoundError("movie not found")
        updated = Movie(
            id=current.id,
            title=movie.title or current.title,
            genre=movie.genre or current.genre,
        )
        self.rows[movie.id] = updated
        return updated

    async def delete_movie(self, movie_id: str) -> None:
        self.calls["delete_movie"] += 1
        if self.rows.pop(movie_id, None) is None:
            raise NotFoundError("movie not found")


class InMemoryMovieCache:
    """Cache double storing JSON payloads like MovieCache does.

    ``failing`` makes every call raise CacheUnavailableError.
    """

    def __init__(self):
        self.entries: Dict[str, str] = {}
        self.calls: Counter = Counter()
        self.failing = False

    def _check(self, name: str):
        self.calls[name] += 1
        if self.failing:
            raise CacheUnavailableError("cache down")

    async def get_movie(self, movie_id: str) -> Optional[Movie]:
        self._check("get_movie")
        payload = self.entries.get(f"movie:{movie_id}")
        return Movie.from_dict(json.loads(payload)) if payload else None

    async def set_movie(self, movie: Movie) -> None:
        self._check("set_movie")
        self.entries[f"movie:{movie.id}"] = json.dumps(movie.to_dict())

    async def delete_movie(self, movie_id: str) -> None:
        self._check("delete_movie")
        self.entries.pop(f"movie:{movie_id}", None)

    async def get_movie_list(self, key: str) -> Optional[MovieListResult]:
        self._check("get_movie_list")
        payload = self.entries.get(key)
        return MovieListResult.from_dict(json.loads(payload)) if payload else None

    async def set_movie_list(self, key: str, result: MovieListResult) -> None:
        self._check("set_movie_list")
        self.entries[key] = json.dumps(result.to_dict())

    async def delete_movie_list(self, key: str) -> None:
        self._check("delete_movie_list")
        self.entries.pop(key, None)


@pytest.fixture
def repository():
    """In-memory movie store."""
    return InMemoryMovieRepository()


@pytest.fixture
def cache():
    """In-memory movie cache."""
    return InMemoryMovieCache()


@pytest.fixture
def catalog(repository, cache):
    """Fail-open catalog over the in-memory doubles."""
    return MovieCatalogService(repository, cache)


@pytest.fixture
def seeded_repository(repository):
    """Store holding three movies."""
    for movie_id, title, genre in [
        ("m1", "Dune", "Sci-Fi"),
        ("m2", "Arrival", "Sci-Fi"),
        ("m3", "Heat", "Crime"),
    ]:
        repository.rows[movie_id] = Movie(id=movie_id, title=title, genre=genre)
    return repository
