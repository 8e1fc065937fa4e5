"""
Utilities module: Exceptions, validators.
"""

from shared.utils.exceptions import (
    NotFoundError,
    ValidationError,
    ConflictError,
    DatabaseError,
)
from shared.utils.validators import (
    escape_like_pattern,
    validate_locale,
    validate_slug,
)

__all__ = [
    # exceptions
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "DatabaseError",
    # validators
    "escape_like_pattern",
    "validate_locale",
    "validate_slug",
]
