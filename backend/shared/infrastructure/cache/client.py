"""
Cache client contract and its Redis implementation.

The query layer only depends on the ``CacheClient`` protocol:
get / set / delete / delete_by_pattern. Cache failures are logged and
degrade to a miss; they never fail the request that triggered them.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Protocol, TypeVar

import redis

from shared.config.logging import get_logger
from shared.infrastructure.cache.keys import CacheKeyBuilder, json_default
from shared.infrastructure.redis.constants import SCAN_BATCH_SIZE

logger = get_logger(__name__)

T = TypeVar("T")


class CacheClient(Protocol):
    """Minimal key/value cache used by the services."""

    def get(self, key: str) -> Any | None:
        """Return the cached value or None on a miss."""
        ...

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        ...

    def delete(self, key: str) -> None:
        ...

    def delete_by_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern. Returns the number deleted."""
        ...


class RedisCache:
    """
    CacheClient backed by redis-py.

    Values are stored as JSON strings. Pattern deletion walks the keyspace
    with SCAN so it never blocks the server the way KEYS does.
    """

    def __init__(self, client: redis.Redis):
        self._redis = client

    def get(self, key: str) -> Any | None:
        try:
            raw = self._redis.get(key)
        except redis.RedisError as e:
            logger.error("Cache get failed", key=key, error=str(e))
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Discarding undecodable cache entry", key=key)
            return None

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        try:
            payload = json.dumps(value, default=json_default)
        except TypeError as e:
            logger.error("Cache value is not serializable", key=key, error=str(e))
            return
        try:
            if ttl:
                self._redis.setex(key, ttl, payload)
            else:
                self._redis.set(key, payload)
        except redis.RedisError as e:
            logger.error("Cache set failed", key=key, error=str(e))

    def delete(self, key: str) -> None:
        try:
            self._redis.delete(key)
        except redis.RedisError as e:
            logger.error("Cache delete failed", key=key, error=str(e))

    def delete_by_pattern(self, pattern: str) -> int:
        deleted = 0
        batch: list[str] = []
        try:
            for key in self._redis.scan_iter(match=pattern, count=SCAN_BATCH_SIZE):
                batch.append(key)
                if len(batch) >= SCAN_BATCH_SIZE:
                    deleted += self._redis.delete(*batch)
                    batch.clear()
            if batch:
                deleted += self._redis.delete(*batch)
        except redis.RedisError as e:
            logger.error("Cache pattern delete failed", pattern=pattern, error=str(e))
        return deleted


def get_or_set(
    cache: CacheClient,
    key: str,
    factory: Callable[[], T],
    ttl: int | None = None,
) -> T:
    """
    Return the cached value for ``key`` or compute, store and return it.

    ``factory`` must return a JSON-serializable value. Exceptions raised by
    the factory propagate and nothing is cached.
    """
    cached = cache.get(key)
    if cached is not None:
        logger.debug("Cache hit", key=key)
        return cached

    logger.debug("Cache miss", key=key)
    value = factory()
    cache.set(key, value, ttl)
    return value


def invalidate_entity(cache: CacheClient, keys: CacheKeyBuilder, entity_id: int | str) -> None:
    """
    Drop everything a write to one entity can make stale:
    the entity key, its per-locale views and every paginated listing.
    """
    cache.delete(keys.by_id(entity_id))
    cache.delete_by_pattern(keys.all_for_id(entity_id))
    cache.delete_by_pattern(keys.all_paginated())
    logger.debug("Cache invalidated", domain=keys.domain, entity_id=entity_id)


def invalidate_domain(cache: CacheClient, keys: CacheKeyBuilder) -> None:
    """Drop every key of a domain (bulk writes, reseeding)."""
    deleted = cache.delete_by_pattern(keys.all_for_domain())
    logger.info("Cache domain invalidated", domain=keys.domain, deleted=deleted)
