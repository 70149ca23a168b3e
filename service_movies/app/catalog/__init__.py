"""
Catalog package for the Movies Service.
"""

from .base import MovieCatalog
from .instrumented import InstrumentedMovieCatalog
from .service import MovieCatalogService

__all__ = ["MovieCatalog", "InstrumentedMovieCatalog", "MovieCatalogService"]
