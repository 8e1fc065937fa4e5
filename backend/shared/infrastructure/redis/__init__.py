"""
Redis package: connection pool and key constants.
"""

from shared.infrastructure.redis.pool import get_redis_client, close_redis_pool

__all__ = [
    "get_redis_client",
    "close_redis_pool",
]
