"""Redis-backed cache for dynamic-role permission lists.

A cache outage is never an authorization failure: every operation degrades
to a miss (get -> None, set/delete -> False) and the caller reads the
database instead.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import redis.asyncio as redis

from medonboard.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class CacheService:
    """Async Redis cache with TTL. connect() at startup, disconnect() at shutdown."""

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.redis = redis_client
        self.settings = settings or get_settings()
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Open the connection when REDIS_ENABLED; failures leave the cache disabled."""
        if self.redis is not None or not self.settings.redis_enabled:
            return
        password = self.settings.redis_password
        client = redis.Redis(
            host=self.settings.redis_host,
            port=self.settings.redis_port,
            db=self.settings.redis_db,
            password=password.get_secret_value() if password else None,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_keepalive=True,
        )
        try:
            await client.ping()
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Redis connection failed: %s. Cache disabled.", e)
            await client.aclose()
            return
        self.redis = client
        self._connected = True
        logger.info(
            "Redis cache connected: %s:%s",
            self.settings.redis_host,
            self.settings.redis_port,
        )

    async def disconnect(self) -> None:
        if self.redis is not None:
            await self.redis.aclose()
            logger.info("Redis cache disconnected")
        self.redis = None
        self._connected = False

    def is_available(self) -> bool:
        return self._connected and self.redis is not None

    async def _reconnect(self) -> bool:
        if self.redis is not None:
            try:
                await self.redis.aclose()
            except redis.RedisError:
                logger.debug("Ignoring error while closing stale Redis client")
        self.redis = None
        self._connected = False
        await self.connect()
        return self.is_available()

    async def _run[T](
        self,
        op: str,
        key: str,
        call: Callable[[redis.Redis], Awaitable[T]],
        default: T,
    ) -> T:
        """Run call against the client, retrying once after a reconnect."""
        if not self.is_available() or self.redis is None:
            return default
        try:
            return await call(self.redis)
        except (redis.ConnectionError, redis.TimeoutError):
            if await self._reconnect() and self.redis is not None:
                try:
                    return await call(self.redis)
                except redis.RedisError:
                    logger.exception("Cache %s error for %s after reconnect", op, key)
                    return default
            logger.warning("Cache %s unavailable for %s (Redis disconnected)", op, key)
            return default
        except redis.RedisError:
            logger.exception("Cache %s error for %s", op, key)
            return default

    async def get(self, key: str) -> Any | None:
        """Return the JSON-decoded value, or None on miss or outage."""

        async def _get(client: redis.Redis) -> Any | None:
            raw = await client.get(key)
            if raw is None:
                logger.debug("Cache MISS: %s", key)
                return None
            logger.debug("Cache HIT: %s", key)
            return json.loads(raw)

        return await self._run("get", key, _get, None)

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value (JSON-serializable) with TTL seconds."""
        serialized = json.dumps(value)

        async def _set(client: redis.Redis) -> bool:
            await client.setex(key, ttl, serialized)
            logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
            return True

        return await self._run("set", key, _set, False)

    async def delete(self, key: str) -> bool:
        async def _delete(client: redis.Redis) -> bool:
            await client.delete(key)
            logger.debug("Cache DELETE: %s", key)
            return True

        return await self._run("delete", key, _delete, False)

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching pattern with SCAN and batched UNLINK."""

        async def _delete_pattern(client: redis.Redis) -> int:
            deleted = 0
            batch: list[str] = []
            async for key in client.scan_iter(match=pattern):
                batch.append(key)
                if len(batch) >= 500:
                    deleted += int(await client.unlink(*batch) or 0)
                    batch = []
            if batch:
                deleted += int(await client.unlink(*batch) or 0)
            if deleted:
                logger.info("Cache INVALIDATE: %s (%s keys)", pattern, deleted)
            return deleted

        return await self._run("delete_pattern", pattern, _delete_pattern, 0)
