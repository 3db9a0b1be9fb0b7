"""Async Redis key-value store used by the product cache."""

import asyncio
import json
from typing import Any, Awaitable, Callable, List, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from config import settings
from utils.logger import cache_logger as logger


class CacheError(Exception):
    """Base class for cache store failures."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class CacheMiss(CacheError):
    """Key is absent or expired."""


class CacheSerializationError(CacheError):
    """Value could not be encoded to or decoded from JSON."""


class CacheUnavailable(CacheError):
    """Store is disabled, unreachable, or did not answer in time."""


class RedisCacheStore:
    """
    JSON-over-Redis store with a fixed TTL.

    Every call is bounded by ``timeout`` seconds. Transport failures and
    timeouts surface as CacheUnavailable; asyncio cancellation is not caught.
    """

    def __init__(
        self,
        client: Optional[redis.Redis] = None,
        ttl: int = settings.CACHE_TTL,
        timeout: float = settings.CACHE_OPERATION_TIMEOUT,
    ):
        self._redis = client
        self._enabled = client is not None
        self.ttl = ttl
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return self._enabled and self._redis is not None

    async def connect(self) -> bool:
        """Connect to Redis; on failure the store stays disabled."""
        if not settings.REDIS_ENABLED:
            logger.warning("Redis disabled by configuration, caching off")
            self._enabled = False
            return False

        try:
            self._redis = redis.Redis(
                host=settings.REDIS_HOST,
                port=settings.REDIS_PORT,
                db=settings.REDIS_DB,
                password=settings.REDIS_PASSWORD,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=self.timeout,
            )
            await self._redis.ping()
            self._enabled = True
            logger.info("Redis cache connected", host=settings.REDIS_HOST, port=settings.REDIS_PORT)
            return True
        except (RedisError, OSError) as exc:
            logger.warning("Redis unavailable, caching disabled", error=str(exc))
            self._enabled = False
            self._redis = None
            return False

    async def disconnect(self):
        if self._redis is not None:
            await self._redis.aclose()
            logger.info("Redis cache disconnected")
        self._redis = None
        self._enabled = False

    async def _call(self, operation: str, make: Callable[[], Awaitable[Any]], key: Optional[str] = None):
        if not self.enabled:
            raise CacheUnavailable("cache store is not connected", key=key)
        try:
            return await asyncio.wait_for(make(), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise CacheUnavailable(f"{operation} timed out after {self.timeout}s", key=key) from exc
        except (RedisError, OSError) as exc:
            raise CacheUnavailable(f"{operation} failed: {exc}", key=key) from exc

    async def ping(self) -> bool:
        try:
            return bool(await self._call("ping", lambda: self._redis.ping()))
        except CacheUnavailable:
            return False

    async def get(self, key: str) -> Any:
        """
        Return the decoded value stored at ``key``.

        Raises:
            CacheMiss: key absent.
            CacheSerializationError: stored bytes are not valid JSON.
            CacheUnavailable: store failure.
        """
        raw = await self._call("get", lambda: self._redis.get(key), key=key)
        if raw is None:
            raise CacheMiss("key not found", key=key)
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as exc:
            raise CacheSerializationError(f"undecodable value: {exc}", key=key) from exc

    async def set(self, key: str, value: Any, ttl: Optional[int] = None):
        """Store ``value`` as JSON, overwriting and expiring after ``ttl`` seconds."""
        try:
            serialized = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise CacheSerializationError(f"unserializable value: {exc}", key=key) from exc
        await self._call("set", lambda: self._redis.setex(key, ttl or self.ttl, serialized), key=key)

    async def exists(self, key: str) -> bool:
        return bool(await self._call("exists", lambda: self._redis.exists(key), key=key))

    async def delete(self, key: str) -> int:
        """Remove one key. Absent keys are not an error."""
        return await self._call("delete", lambda: self._redis.delete(key), key=key)

    async def scan_keys(self, pattern: str) -> List[str]:
        async def collect() -> List[str]:
            return [k async for k in self._redis.scan_iter(match=pattern, count=500)]

        return await self._call("scan", collect, key=pattern)

    async def delete_pattern(self, pattern: str) -> int:
        """
        Delete every key matching a glob.

        Keys are enumerated first and deleted afterwards, so a key written in
        between may survive. Acceptable for cache data only.
        """
        keys = await self.scan_keys(pattern)
        if not keys:
            return 0
        deleted = await self._call("delete", lambda: self._redis.delete(*keys), key=pattern)
        logger.info("Cache pattern deleted", pattern=pattern, count=deleted)
        return deleted

    async def count_pattern(self, pattern: str) -> int:
        return len(await self.scan_keys(pattern))
