"""
Movie data models for the Movies Service.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class Movie:
    """A catalog entry. The id is assigned by the store and never changes."""

    id: str
    title: str
    genre: str = ""

    def with_id(self, movie_id: str) -> "Movie":
        return replace(self, id=movie_id)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "genre": self.genre}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Movie":
        """Rehydrate a movie from cached JSON state."""
        return cls(
            id=str(payload["id"]),
            title=str(payload["title"]),
            genre=str(payload.get("genre", "")),
        )


@dataclass(frozen=True)
class ListingQuery:
    """Page, page size and optional search filter for a listing."""

    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE
    search: str = ""

    def clamped(self, default_page_size: int = DEFAULT_PAGE_SIZE) -> "ListingQuery":
        """Replace non-positive page/page size with their defaults."""
        page = self.page if self.page >= 1 else DEFAULT_PAGE
        page_size = self.page_size if self.page_size >= 1 else default_page_size
        return ListingQuery(page=page, page_size=page_size, search=self.search or "")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class MovieListResult:
    """One page of movies plus the size of the whole filtered set."""

    movies: List[Movie] = field(default_factory=list)
    total_records: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "movies": [movie.to_dict() for movie in self.movies],
            "total_records": self.total_records,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "MovieListResult":
        """Rehydrate a listing from cached JSON state."""
        movies = payload["movies"]
        if not isinstance(movies, list):
            raise TypeError("movies must be a list")
        return cls(
            movies=[Movie.from_dict(item) for item in movies],
            total_records=int(payload["total_records"]),
        )


class MovieCreateRequest(BaseModel):
    """Request model for creating a movie."""
    title: str = Field(..., min_length=1, description="Display title")
    genre: str = Field("", description="Free-text genre")


class MovieUpdateRequest(BaseModel):
    """Request model for updating a movie; omitted or empty fields are left unchanged."""
    title: Optional[str] = Field(None, description="New title")
    genre: Optional[str] = Field(None, description="New genre")


class MovieResponse(BaseModel):
    """Response model for a single movie."""
    id: str
    title: str
    genre: str

    @classmethod
    def from_movie(cls, movie: Movie) -> "MovieResponse":
        return cls(id=movie.id, title=movie.title, genre=movie.genre)


class MovieListResponse(BaseModel):
    """Response model for a page of movies."""
    movies: List[MovieResponse]
    total_records: int
    page: int
    page_size: int


class DeleteMovieResponse(BaseModel):
    """Response model for movie deletion."""
    success: bool = True
