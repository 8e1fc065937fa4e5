"""
Course Service.

Business rules:
- slug is unique and URL-safe
- instructor and dance style must exist when given
- translations are upserted with the course in one transaction
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from rest_api.models import Course, DanceStyle, User
from rest_api.repositories import get_course_repository
from rest_api.services.base_service import TranslatableCrudService
from shared.config.constants import CacheDomain
from shared.infrastructure.cache import CacheClient
from shared.utils.exceptions import DuplicateEntityError
from shared.utils.schemas import CourseOutput


class CourseService(TranslatableCrudService[Course]):
    """Service for course management."""

    def __init__(self, db: Session, cache: CacheClient):
        super().__init__(
            db=db,
            repository=get_course_repository(db),
            cache=cache,
            output_schema=CourseOutput,
            domain=CacheDomain.COURSE,
        )

    def _validate_create(self, data: dict[str, Any]) -> None:
        super()._validate_create(data)
        if self._repo.find_by_slug(data["slug"]) is not None:
            raise DuplicateEntityError("Course", data["slug"], field="slug")
        self._check_reference(User, data.get("instructor_id"), "instructorId")
        self._check_reference(DanceStyle, data.get("dance_style_id"), "danceStyleId")

    def _validate_update(self, entity_id: int, data: dict[str, Any]) -> None:
        super()._validate_update(entity_id, data)
        if data.get("slug") is not None:
            existing = self._repo.find_by_slug(data["slug"])
            if existing is not None and existing.id != entity_id:
                raise DuplicateEntityError("Course", data["slug"], field="slug")
        self._check_reference(User, data.get("instructor_id"), "instructorId")
        self._check_reference(DanceStyle, data.get("dance_style_id"), "danceStyleId")
