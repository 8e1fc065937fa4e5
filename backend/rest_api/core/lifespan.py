"""
Application lifespan: startup checks and shutdown cleanup.
"""

from contextlib import asynccontextmanager

import redis
from fastapi import FastAPI

from shared.config.settings import settings
from shared.config.logging import setup_logging, rest_api_logger as logger
from shared.infrastructure.db import engine
from shared.infrastructure.redis import close_redis_pool, get_redis_client
from rest_api.models import Base


def _check_configuration() -> None:
    """Refuse to start a misconfigured production server."""
    errors = settings.validate_production_settings()
    for error in errors:
        logger.error("Configuration error", error=error)
    if errors and settings.environment == "production":
        raise RuntimeError(f"Production configuration errors: {'; '.join(errors)}")


def _probe_cache() -> None:
    # The API serves uncached when Redis is down, so this only warns
    try:
        get_redis_client().ping()
        logger.info("Cache reachable")
    except redis.RedisError as e:
        logger.warning("Cache unreachable at startup, serving uncached", error=str(e))


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    _check_configuration()

    logger.info(
        "Starting REST API",
        port=settings.rest_api_port,
        env=settings.environment,
        locales=settings.locales,
        ttl_list=settings.cache_ttl_short,
        ttl_entity=settings.cache_ttl_medium,
    )

    if settings.db_create_tables:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created/verified")

    _probe_cache()

    yield

    logger.info("Shutting down REST API")
    close_redis_pool()
    engine.dispose()
