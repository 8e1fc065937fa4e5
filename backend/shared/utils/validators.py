"""
Input validation helpers shared by the query layer and the services.
"""

import re

from shared.config.constants import Limits
from shared.config.settings import settings
from shared.utils.exceptions import ValidationError


_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_LOCALE_PATTERN = re.compile(r"^[a-z]{2}(?:[-_][A-Za-z]{2})?$")


def escape_like_pattern(value: str) -> str:
    """
    Escape special characters in LIKE patterns.

    SQL LIKE uses % and _ as wildcards. Free-text search terms are escaped
    so a user-supplied term matches literally.

    Args:
        value: The search string to escape

    Returns:
        The escaped string safe for use in LIKE patterns
    """
    if not value:
        return value

    # Escape the escape character first, then the wildcards
    value = value.replace("\\", "\\\\")
    value = value.replace("%", "\\%")
    value = value.replace("_", "\\_")
    return value


def normalize_search_term(term: str) -> str:
    """Strip and truncate a free-text search term."""
    return term.strip()[:Limits.MAX_SEARCH_TERM_LENGTH]


def validate_locale(locale: str | None, *, field: str = "locale") -> str | None:
    """
    Validate a locale identifier against the configured locales.

    Returns None for empty input so callers can treat "" and None alike.
    """
    if locale is None:
        return None
    locale = locale.strip()
    if not locale:
        return None
    if len(locale) > Limits.MAX_LOCALE_LENGTH or not _LOCALE_PATTERN.match(locale):
        raise ValidationError(f"Invalid locale '{locale}'", field=field)
    if locale not in settings.locales:
        raise ValidationError(
            f"Unsupported locale '{locale}'. Supported: {', '.join(settings.locales)}",
            field=field,
        )
    return locale


def validate_slug(slug: str, *, field: str = "slug") -> str:
    """Validate a URL slug (lowercase words separated by single dashes). Input is lowercased."""
    slug = slug.strip().lower()
    if not slug or len(slug) > Limits.MAX_SLUG_LENGTH or not _SLUG_PATTERN.match(slug):
        raise ValidationError(f"Invalid slug '{slug}'", field=field)
    return slug
