"""Cache: Redis client wrapper and key builders."""

from medonboard.infrastructure.cache.keys import (
    all_role_permissions_pattern,
    role_permissions_key,
)
from medonboard.infrastructure.cache.redis_cache import CacheService

__all__ = ["CacheService", "all_role_permissions_pattern", "role_permissions_key"]
