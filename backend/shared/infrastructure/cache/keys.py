"""
Cache-key builders.

Keys are "<domain>:<operation>:<discriminator>". Paginated keys embed a
canonical serialization of the normalized request so that two requests that
differ only in object key order map to the same entry.

Usage:
    keys = CacheKeyBuilder(CacheDomain.COURSE)
    keys.by_id(12)                   # "course:id:12"
    keys.by_id(12, variant="fr")     # "course:id:12:fr"
    keys.paginated(request)          # "course:paginated:eyJmaWx0ZXIiOm51bGws..."
    keys.all_paginated()             # "course:paginated:*"
"""

from __future__ import annotations

import base64
import json
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any

from shared.infrastructure.redis.constants import (
    KEY_SEPARATOR,
    OPERATION_BY_ID,
    OPERATION_PAGINATED,
    OPERATION_USER,
)

if TYPE_CHECKING:
    from shared.query.pagination import PaginatedRequest


def json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (Decimal, uuid.UUID)):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    raise TypeError(f"Object of type {type(value).__name__} is not serializable")


def canonical_json(data: Any) -> str:
    """
    Serialize to JSON with sorted object keys and no insignificant whitespace.

    Two structures that compare equal produce the same string regardless of
    the insertion order of their keys.
    """
    return json.dumps(
        data,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=json_default,
    )


def stable_serialize(data: Any) -> str:
    """
    Canonical JSON encoded as unpadded URL-safe base64.

    The encoding keeps glob metacharacters ("*", "?", "[") out of keys, so a
    serialized request can never be mistaken for a pattern during deletion.
    """
    raw = canonical_json(data).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


@dataclass(frozen=True)
class CacheKey:
    """A structured cache key."""

    domain: str
    operation: str
    discriminator: str

    def __str__(self) -> str:
        return KEY_SEPARATOR.join((self.domain, self.operation, self.discriminator))


class CacheKeyBuilder:
    """Builds keys and invalidation patterns for one entity domain."""

    def __init__(self, domain: str):
        if not domain or KEY_SEPARATOR in domain:
            raise ValueError(f"Invalid cache domain: {domain!r}")
        self.domain = domain

    def __repr__(self) -> str:
        return f"CacheKeyBuilder({self.domain!r})"

    # =========================================================================
    # Keys
    # =========================================================================

    def by_id(self, entity_id: int | str, variant: str | None = None) -> str:
        """Key for one entity instance, optionally for one view of it (locale, "all")."""
        discriminator = str(entity_id)
        if variant:
            discriminator = f"{discriminator}{KEY_SEPARATOR}{variant}"
        return str(CacheKey(self.domain, OPERATION_BY_ID, discriminator))

    def paginated(self, request: "PaginatedRequest | dict[str, Any]") -> str:
        """Key for one page of a listing."""
        payload = request if isinstance(request, dict) else request.cache_payload()
        return str(CacheKey(self.domain, OPERATION_PAGINATED, stable_serialize(payload)))

    def user_scoped(self, user_id: int | str, discriminator: Any) -> str:
        """Key for data that belongs to one user (enrollments, progress, ...)."""
        if not isinstance(discriminator, str):
            discriminator = stable_serialize(discriminator)
        return str(
            CacheKey(
                self.domain,
                OPERATION_USER,
                f"{user_id}{KEY_SEPARATOR}{discriminator}",
            )
        )

    # =========================================================================
    # Patterns (bulk invalidation)
    # =========================================================================

    def all_for_domain(self) -> str:
        return f"{self.domain}{KEY_SEPARATOR}*"

    def all_paginated(self) -> str:
        return f"{self.domain}{KEY_SEPARATOR}{OPERATION_PAGINATED}{KEY_SEPARATOR}*"

    def all_for_id(self, entity_id: int | str) -> str:
        """Every view of one entity except the bare by_id key itself."""
        return f"{self.by_id(entity_id)}{KEY_SEPARATOR}*"

    def all_for_user(self, user_id: int | str) -> str:
        return f"{self.domain}{KEY_SEPARATOR}{OPERATION_USER}{KEY_SEPARATOR}{user_id}{KEY_SEPARATOR}*"
