"""
Application-wide constants.
Centralizes limits, enums and cache TTLs used across services.
"""

from enum import Enum
from typing import Final


# =============================================================================
# Validation Limits
# =============================================================================


class Limits:
    """Validation limits."""

    # Pagination defaults
    DEFAULT_PAGE: Final[int] = 1
    DEFAULT_PAGE_SIZE: Final[int] = 10
    MAX_PAGE_SIZE: Final[int] = 100

    # String lengths
    MAX_NAME_LENGTH: Final[int] = 255
    MAX_SLUG_LENGTH: Final[int] = 255
    MAX_DESCRIPTION_LENGTH: Final[int] = 5000
    MAX_SEARCH_TERM_LENGTH: Final[int] = 100
    MAX_LOCALE_LENGTH: Final[int] = 10


# =============================================================================
# Cache
# =============================================================================


class CacheDomain:
    """Cache-key namespaces, one per entity type."""

    USER: Final[str] = "user"
    DANCE_STYLE: Final[str] = "dance_style"
    COURSE: Final[str] = "course"
    LESSON: Final[str] = "lesson"
    ARTIST: Final[str] = "artist"
    ALBUM: Final[str] = "album"
    SONG: Final[str] = "song"
    VENUE: Final[str] = "venue"


# =============================================================================
# Domain Enums
# =============================================================================


class CourseLevel(str, Enum):
    """Course difficulty levels."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class UserStatus(str, Enum):
    """User account status."""

    ACTIVE = "active"
    PENDING = "pending"
    SUSPENDED = "suspended"
