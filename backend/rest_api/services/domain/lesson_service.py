"""
Lesson Service.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from rest_api.models import Course, Lesson
from rest_api.repositories import get_lesson_repository
from rest_api.services.base_service import TranslatableCrudService
from shared.config.constants import CacheDomain
from shared.infrastructure.cache import CacheClient
from shared.utils.schemas import LessonOutput


class LessonService(TranslatableCrudService[Lesson]):
    """
    Service for lesson management.

    Lessons are listed inside courses (?with=lessons); a lesson write drops
    every cache domain that can embed it, courses included.
    """

    def __init__(self, db: Session, cache: CacheClient):
        super().__init__(
            db=db,
            repository=get_lesson_repository(db),
            cache=cache,
            output_schema=LessonOutput,
            domain=CacheDomain.LESSON,
        )

    def _validate_create(self, data: dict[str, Any]) -> None:
        super()._validate_create(data)
        self._check_reference(Course, data.get("course_id"), "courseId")

    def _validate_update(self, entity_id: int, data: dict[str, Any]) -> None:
        super()._validate_update(entity_id, data)
        self._check_parent(Course, data, "course_id", "courseId")
