"""
Health check endpoint for the REST API.
Reports reachability of PostgreSQL and Redis.
"""

import redis
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.config.logging import get_logger
from shared.infrastructure.db import get_db
from shared.infrastructure.redis import get_redis_client
from shared.utils.schemas import HealthOutput

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["health"])


def check_database(db: Session) -> bool:
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error("Database health check failed", error=str(e))
        return False


def check_cache() -> bool:
    try:
        return bool(get_redis_client().ping())
    except redis.RedisError as e:
        logger.warning("Redis health check failed", error=str(e))
        return False


@router.get("/health", response_model=HealthOutput)
def health_check(db: Session = Depends(get_db)):
    """
    Health check.

    A cache outage only degrades the service (reads fall through to the
    database); a database outage returns 503.
    """
    database = check_database(db)
    cache = check_cache()
    result = HealthOutput(
        status="ok" if database and cache else "degraded",
        database=database,
        cache=cache,
    )
    if not database:
        return JSONResponse(content=result.model_dump(), status_code=503)
    return result
