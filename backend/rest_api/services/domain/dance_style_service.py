"""
Dance Style Service.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from rest_api.models import DanceStyle
from rest_api.repositories import get_dance_style_repository
from rest_api.services.base_service import TranslatableCrudService
from shared.config.constants import CacheDomain
from shared.infrastructure.cache import CacheClient
from shared.utils.exceptions import DuplicateEntityError
from shared.utils.schemas import DanceStyleOutput


class DanceStyleService(TranslatableCrudService[DanceStyle]):
    """Service for dance style management."""

    def __init__(self, db: Session, cache: CacheClient):
        super().__init__(
            db=db,
            repository=get_dance_style_repository(db),
            cache=cache,
            output_schema=DanceStyleOutput,
            domain=CacheDomain.DANCE_STYLE,
        )

    def _validate_create(self, data: dict[str, Any]) -> None:
        super()._validate_create(data)
        if self._repo.find_by_slug(data["slug"]) is not None:
            raise DuplicateEntityError("DanceStyle", data["slug"], field="slug")

    def _validate_update(self, entity_id: int, data: dict[str, Any]) -> None:
        super()._validate_update(entity_id, data)
        if data.get("slug") is not None:
            existing = self._repo.find_by_slug(data["slug"])
            if existing is not None and existing.id != entity_id:
                raise DuplicateEntityError("DanceStyle", data["slug"], field="slug")
