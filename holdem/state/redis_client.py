"""Async Redis client wrapper."""
from __future__ import annotations
import json
from typing import Any, Optional
from redis.asyncio import Redis, from_url

from holdem.config import config
from holdem.utils.logger import get_logger

logger = get_logger(__name__)


class RedisClient:
    """Async Redis client wrapper with JSON serialization."""

    _instance: Optional["RedisClient"] = None
    _redis: Optional[Redis] = None

    def __new__(cls) -> "RedisClient":
        """Singleton pattern for Redis client."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    async def connect(self, url: Optional[str] = None) -> None:
        """Connect to Redis.

        Args:
            url: Redis URL; uses config.redis_url if not provided.
        """
        if self._redis is None:
            url = url or config.redis_url
            self._redis = from_url(url, encoding="utf-8", decode_responses=True)
            await self._redis.ping()
            logger.info(f"Connected to Redis at {url}")

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            logger.info("Disconnected from Redis")

    @property
    def redis(self) -> Redis:
        """Get Redis connection, raise if not connected."""
        if self._redis is None:
            raise RuntimeError("Redis not connected. Call connect() first.")
        return self._redis

    # Basic operations
    async def get(self, key: str) -> Optional[str]:
        """Get a string value."""
        return await self.redis.get(key)

    async def set(self, key: str, value: str, ex: Optional[int] = None) -> None:
        """Set a string value with optional expiry in seconds."""
        await self.redis.set(key, value, ex=ex)

    async def delete(self, *keys: str) -> None:
        """Delete keys."""
        await self.redis.delete(*keys)

    # JSON operations
    async def get_json(self, key: str) -> Optional[Any]:
        """Get and deserialize JSON value."""
        value = await self.get(key)
        if value is None:
            return None
        return json.loads(value)

    async def set_json(self, key: str, value: Any, ex: Optional[int] = None) -> None:
        """Serialize and set JSON value."""
        await self.set(key, json.dumps(value, sort_keys=True), ex=ex)

    # List operations
    async def rpush(self, key: str, *values: str) -> None:
        """Push values to the right of a list."""
        await self.redis.rpush(key, *values)

    async def lrange(self, key: str, start: int, stop: int) -> list[str]:
        """Get a range of list elements."""
        return await self.redis.lrange(key, start, stop)


# Global instance
redis_client = RedisClient()
