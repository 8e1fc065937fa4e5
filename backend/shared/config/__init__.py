"""
Configuration module: Settings, logging, constants.
"""

from shared.config.settings import settings, DATABASE_URL, REDIS_URL, DEFAULT_LOCALE
from shared.config.logging import get_logger, setup_logging
from shared.config.constants import (
    Limits,
    CacheDomain,
    CourseLevel,
    UserStatus,
)

__all__ = [
    # settings
    "settings",
    "DATABASE_URL",
    "REDIS_URL",
    "DEFAULT_LOCALE",
    # logging
    "get_logger",
    "setup_logging",
    # constants
    "Limits",
    "CacheDomain",
    "CourseLevel",
    "UserStatus",
]
