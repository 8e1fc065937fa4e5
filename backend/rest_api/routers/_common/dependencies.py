"""
Shared router dependencies.
"""

from typing import Any

from shared.infrastructure.cache import CacheClient, RedisCache
from shared.infrastructure.redis import get_redis_client
from shared.query.filters import decode_query_value
from shared.query.relations import split_relation_param


def get_cache() -> CacheClient:
    """Request-scoped cache client over the shared Redis pool."""
    return RedisCache(get_redis_client())


def parse_with_param(value: str | None) -> list[Any]:
    """
    Relations requested on a detail endpoint: "a,b.c" or a JSON list/object,
    accepted in the same forms as the list endpoints.
    """
    if not value:
        return []
    decoded = decode_query_value(value)
    if isinstance(decoded, list):
        return decoded
    if isinstance(decoded, dict):
        return [decoded]
    return split_relation_param(value)
