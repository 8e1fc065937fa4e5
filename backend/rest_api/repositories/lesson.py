"""
Lesson Repository - Data access for lessons and their translations.
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from shared.query.filters import EntityFields, FieldType, RelationFields

from rest_api.models import Lesson, LessonTranslation
from .translatable import TranslatableRepository

LESSON_FIELDS = EntityFields(
    entity="Lesson",
    columns={
        "id": FieldType.INTEGER,
        "course_id": FieldType.INTEGER,
        "position": FieldType.INTEGER,
        "duration": FieldType.INTEGER,
        "created_at": FieldType.DATETIME,
        "updated_at": FieldType.DATETIME,
    },
    relations={
        "translation": RelationFields(
            columns={
                "locale": FieldType.TEXT,
                "name": FieldType.TEXT,
                "description": FieldType.TEXT,
            },
            locale_aware=True,
            attribute="translations",
        ),
        "course": RelationFields(
            columns={"slug": FieldType.TEXT, "level": FieldType.TEXT},
        ),
    },
    aliases={"name": "translation.name"},
    search_fields=("translation.name",),
)


class LessonRepository(TranslatableRepository[Lesson, LessonTranslation]):
    """Repository for Lesson entities."""

    @property
    def model(self) -> type[Lesson]:
        return Lesson

    @property
    def fields(self) -> EntityFields:
        return LESSON_FIELDS

    @property
    def translation_model(self) -> type[LessonTranslation]:
        return LessonTranslation

    @property
    def translation_foreign_key(self) -> str:
        return "lesson_id"

    def find_by_course(self, course_id: int) -> Sequence[Lesson]:
        """Lessons of a course in playback order."""
        query = (
            select(Lesson)
            .where(Lesson.course_id == course_id)
            .order_by(Lesson.position, Lesson.id)
        )
        return self._db.execute(query).scalars().all()


def get_lesson_repository(db: Session) -> LessonRepository:
    """Factory function for dependency injection."""
    return LessonRepository(db)
