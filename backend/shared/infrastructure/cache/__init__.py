"""
Cache package: key builders, the cache client contract and its Redis
implementation.
"""

from shared.infrastructure.cache.keys import (
    CacheKey,
    CacheKeyBuilder,
    canonical_json,
    stable_serialize,
)
from shared.infrastructure.cache.client import (
    CacheClient,
    RedisCache,
    get_or_set,
    invalidate_entity,
    invalidate_domain,
)

__all__ = [
    # keys
    "CacheKey",
    "CacheKeyBuilder",
    "canonical_json",
    "stable_serialize",
    # client
    "CacheClient",
    "RedisCache",
    "get_or_set",
    "invalidate_entity",
    "invalidate_domain",
]
