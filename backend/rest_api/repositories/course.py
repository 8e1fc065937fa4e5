"""
Course Repository - Data access for courses and their translations.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from shared.query.filters import EntityFields, FieldType, RelationFields

from rest_api.models import Course, CourseTranslation
from .translatable import TranslatableRepository

TRANSLATION_FIELDS = RelationFields(
    columns={
        "locale": FieldType.TEXT,
        "name": FieldType.TEXT,
        "description": FieldType.TEXT,
    },
    locale_aware=True,
    attribute="translations",
)

COURSE_FIELDS = EntityFields(
    entity="Course",
    columns={
        "id": FieldType.INTEGER,
        "slug": FieldType.TEXT,
        "level": FieldType.TEXT,
        "duration": FieldType.INTEGER,
        "price": FieldType.NUMBER,
        "instructor_id": FieldType.INTEGER,
        "dance_style_id": FieldType.INTEGER,
        "created_at": FieldType.DATETIME,
        "updated_at": FieldType.DATETIME,
    },
    relations={
        "translation": TRANSLATION_FIELDS,
        "instructor": RelationFields(
            columns={"name": FieldType.TEXT, "email": FieldType.TEXT},
        ),
        "dance_style": RelationFields(
            columns={"slug": FieldType.TEXT},
        ),
    },
    aliases={
        "name": "translation.name",
        "description": "translation.description",
    },
    search_fields=("translation.name", "translation.description"),
)


class CourseRepository(TranslatableRepository[Course, CourseTranslation]):
    """
    Repository for Course entities.

    Filterable relations:
    - translation (locale-aware): name, description
    - instructor: name, email
    - dance_style: slug
    """

    @property
    def model(self) -> type[Course]:
        return Course

    @property
    def fields(self) -> EntityFields:
        return COURSE_FIELDS

    @property
    def translation_model(self) -> type[CourseTranslation]:
        return CourseTranslation

    @property
    def translation_foreign_key(self) -> str:
        return "course_id"

    def find_by_slug(self, slug: str) -> Course | None:
        return self._db.scalar(select(Course).where(Course.slug == slug))


def get_course_repository(db: Session) -> CourseRepository:
    """Factory function for dependency injection."""
    return CourseRepository(db)
