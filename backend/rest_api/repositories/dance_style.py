"""
Dance Style Repository.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from shared.query.filters import EntityFields, FieldType, RelationFields

from rest_api.models import DanceStyle, DanceStyleTranslation
from .translatable import TranslatableRepository

DANCE_STYLE_FIELDS = EntityFields(
    entity="DanceStyle",
    columns={
        "id": FieldType.INTEGER,
        "slug": FieldType.TEXT,
        "created_at": FieldType.DATETIME,
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
    },
    aliases={"name": "translation.name"},
    search_fields=("translation.name",),
)


class DanceStyleRepository(TranslatableRepository[DanceStyle, DanceStyleTranslation]):
    """Repository for DanceStyle entities."""

    @property
    def model(self) -> type[DanceStyle]:
        return DanceStyle

    @property
    def fields(self) -> EntityFields:
        return DANCE_STYLE_FIELDS

    @property
    def translation_model(self) -> type[DanceStyleTranslation]:
        return DanceStyleTranslation

    @property
    def translation_foreign_key(self) -> str:
        return "dance_style_id"

    def find_by_slug(self, slug: str) -> DanceStyle | None:
        return self._db.scalar(select(DanceStyle).where(DanceStyle.slug == slug))


def get_dance_style_repository(db: Session) -> DanceStyleRepository:
    """Factory function for dependency injection."""
    return DanceStyleRepository(db)
