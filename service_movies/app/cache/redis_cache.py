"""
Redis caching layer for the Movies Service.
"""

import json
from typing import Any, Callable, Dict, Optional, TypeVar

import redis.asyncio as redis
from redis.exceptions import RedisError

from shared.errors import CacheUnavailableError, ServiceError
from shared.logging import get_logger
from shared.metrics import MetricsCollector
from .keys import movie_key
from ..models import Movie, MovieListResult

T = TypeVar("T")

MOVIE_NAMESPACE = "movie"
MOVIE_LIST_NAMESPACE = "movie_list"


class MovieCache:
    """Redis-backed store for movie snapshots and listing snapshots.

    Every entry is written with the same fixed TTL. A miss is reported as
    ``None``; an unreachable backend or an undecodable payload raises
    CacheUnavailableError so the caller can choose to fall back to the store.
    """

    def __init__(
        self,
        redis_url: str,
        ttl_seconds: int = 300,
        *,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self.metrics = metrics
        self.logger = get_logger("movies.cache.redis")
        self.redis: Optional[redis.Redis] = None

    async def start(self):
        """Start the Redis cache."""
        try:
            self.redis = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                health_check_interval=30
            )

            # Test connection
            await self.redis.ping()

            self.logger.info("Redis cache started")

        except (RedisError, OSError) as e:
            self.logger.error("Failed to start Redis cache", error=str(e))
            raise ServiceError(f"Redis start failed: {e}") from e

    async def stop(self):
        """Stop the Redis cache."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self.logger.info("Redis cache stopped")

    async def get_movie(self, movie_id: str) -> Optional[Movie]:
        """Get a cached movie snapshot."""
        return await self._get(MOVIE_NAMESPACE, movie_key(movie_id), Movie.from_dict)

    async def set_movie(self, movie: Movie) -> None:
        """Cache a movie snapshot under its id."""
        await self._set(movie_key(movie.id), movie.to_dict())

    async def delete_movie(self, movie_id: str) -> None:
        """Drop a cached movie snapshot; a missing entry is not an error."""
        await self._delete(movie_key(movie_id))

    async def get_movie_list(self, key: str) -> Optional[MovieListResult]:
        """Get a cached listing snapshot."""
        return await self._get(MOVIE_LIST_NAMESPACE, key, MovieListResult.from_dict)

    async def set_movie_list(self, key: str, result: MovieListResult) -> None:
        """Cache a listing snapshot under a derived key."""
        await self._set(key, result.to_dict())

    async def delete_movie_list(self, key: str) -> None:
        """Drop a cached listing snapshot; a missing entry is not an error."""
        await self._delete(key)

    async def health_check(self) -> bool:
        """Check Redis health."""
        if self.redis is None:
            return False
        try:
            return bool(await self.redis.ping())
        except (RedisError, OSError) as e:
            self.logger.error("Redis health check failed", error=str(e))
            return False

    def _client(self) -> redis.Redis:
        if self.redis is None:
            raise CacheUnavailableError("Redis cache not started")
        return self.redis

    async def _get(self, namespace: str, key: str, decode: Callable[[Dict[str, Any]], T]) -> Optional[T]:
        client = self._client()
        try:
            cached_data = await client.get(key)
        except (RedisError, OSError) as e:
            self._record(namespace, "error")
            raise CacheUnavailableError(f"Redis read failed: {e}", details={"key": key}) from e
        except UnicodeDecodeError as e:
            # decode_responses=True decodes inside the client
            self._record(namespace, "error")
            raise CacheUnavailableError(f"Malformed cache payload: {e}", details={"key": key}) from e

        if cached_data is None:
            self._record(namespace, "miss")
            return None

        try:
            value = decode(json.loads(cached_data))
        except (ValueError, KeyError, TypeError) as e:
            self._record(namespace, "error")
            raise CacheUnavailableError(f"Malformed cache payload: {e}", details={"key": key}) from e

        self._record(namespace, "hit")
        self.logger.debug("Cache hit", cache_key=key)
        return value

    async def _set(self, key: str, payload: Dict[str, Any]) -> None:
        client = self._client()
        try:
            await client.set(key, json.dumps(payload), ex=self.ttl_seconds)
        except (RedisError, OSError) as e:
            raise CacheUnavailableError(f"Redis write failed: {e}", details={"key": key}) from e
        self.logger.debug("Cached entry", cache_key=key, ttl=self.ttl_seconds)

    async def _delete(self, key: str) -> None:
        client = self._client()
        try:
            await client.delete(key)
        except (RedisError, OSError) as e:
            raise CacheUnavailableError(f"Redis delete failed: {e}", details={"key": key}) from e

    def _record(self, namespace: str, result: str) -> None:
        if self.metrics:
            self.metrics.record_cache_lookup(namespace, result)
