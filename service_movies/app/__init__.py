"""
Movies Service package for the Movie Catalog.

This package serves paginated, searchable reads and mutations of movies,
backed by PostgreSQL and fronted by a Redis cache. It provides:

- app.main: API surface for the five catalog operations and health.
- app.models: Movie, listing query/result and request/response models.
- app.cache: Redis cache for movie and listing snapshots, key derivation.
- app.persistence: PostgreSQL store for movies.
- app.catalog: Cache-aside coordination and its instrumentation.

Guidelines:
- The service is stateless; rely on external cache/DB.
- The store is the source of truth; cache entries are disposable.
- Keep every operation observable (spans + logs + metrics).
"""
