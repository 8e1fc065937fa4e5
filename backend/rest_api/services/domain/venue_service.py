"""
Venue Service.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from rest_api.models import User, Venue
from rest_api.repositories import get_venue_repository
from rest_api.services.base_service import CachedCrudService
from shared.config.constants import CacheDomain
from shared.infrastructure.cache import CacheClient
from shared.utils.exceptions import DuplicateEntityError
from shared.utils.schemas import VenueOutput


class VenueService(CachedCrudService[Venue]):
    """
    Service for venue management.

    Business rules:
    - slug is unique and URL-safe
    - owner must be an existing user
    """

    def __init__(self, db: Session, cache: CacheClient):
        super().__init__(
            db=db,
            repository=get_venue_repository(db),
            cache=cache,
            output_schema=VenueOutput,
            domain=CacheDomain.VENUE,
        )

    def _validate_create(self, data: dict[str, Any]) -> None:
        super()._validate_create(data)
        if self._repo.find_by_slug(data["slug"]) is not None:
            raise DuplicateEntityError("Venue", data["slug"], field="slug")
        self._check_reference(User, data.get("owner_id"), "ownerId")

    def _validate_update(self, entity_id: int, data: dict[str, Any]) -> None:
        super()._validate_update(entity_id, data)
        self._check_reference(User, data.get("owner_id"), "ownerId")
