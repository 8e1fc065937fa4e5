"""
Infrastructure module: Database, Redis and caching.

Provides:
- Database sessions and transactions (db.py)
- Redis connection pool (redis/)
- Cache client and cache-key builders (cache/)
- Request correlation IDs (correlation.py)

Import from the submodules directly:
    from shared.infrastructure.db import get_db, safe_commit
    from shared.infrastructure.cache import CacheKeyBuilder, RedisCache
"""
