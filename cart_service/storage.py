"""
Cart Storage Module

Asynchronous key-value backends holding the serialized cart snapshot.

Contract:
    get(key) -> str | None
    set(key, value) -> None

RedisStorage is the durable backend; MemoryStorage keeps values in a dict
and is used for embedded runs and tests.
"""

import logging
from typing import Dict, Optional, Protocol, runtime_checkable

import redis.asyncio as redis

logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStorage(Protocol):
    """Namespaced async key-value store used for the cart snapshot."""

    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...


class RedisStorage:
    """Storage backed by Redis string keys."""

    def __init__(self, redis_client: redis.Redis, ttl: Optional[int] = None):
        """
        Args:
            redis_client: client created with decode_responses=True
            ttl: optional expiration in seconds, reset on every write
        """
        self.redis = redis_client
        self.ttl = ttl

    @classmethod
    def from_settings(cls, settings) -> "RedisStorage":
        client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            decode_responses=True,
        )
        return cls(client, ttl=settings.cart_ttl)

    async def get(self, key: str) -> Optional[str]:
        value = await self.redis.get(key)
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    async def set(self, key: str, value: str) -> None:
        await self.redis.set(key, value, ex=self.ttl)
        logger.debug(f"Stored {len(value)} bytes under {key}", extra={"cart_key": key})

    async def ping(self) -> bool:
        return await self.redis.ping()

    async def close(self) -> None:
        await self.redis.aclose()


class MemoryStorage:
    """Storage kept in a process-local dict."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value
