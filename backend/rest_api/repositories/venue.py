"""
Venue Repository.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from shared.query.filters import EntityFields, FieldType, RelationFields

from rest_api.models import Venue
from .base import BaseRepository

VENUE_FIELDS = EntityFields(
    entity="Venue",
    columns={
        "id": FieldType.INTEGER,
        "name": FieldType.TEXT,
        "slug": FieldType.TEXT,
        "city": FieldType.TEXT,
        "country": FieldType.TEXT,
        "capacity": FieldType.INTEGER,
        "has_parking": FieldType.BOOLEAN,
        "owner_id": FieldType.INTEGER,
        "created_at": FieldType.DATETIME,
    },
    relations={
        "owner": RelationFields(columns={"name": FieldType.TEXT}),
    },
    search_fields=("name", "city"),
)


class VenueRepository(BaseRepository[Venue]):
    """Repository for Venue entities."""

    @property
    def model(self) -> type[Venue]:
        return Venue

    @property
    def fields(self) -> EntityFields:
        return VENUE_FIELDS

    def find_by_slug(self, slug: str) -> Venue | None:
        return self._db.scalar(select(Venue).where(Venue.slug == slug))


def get_venue_repository(db: Session) -> VenueRepository:
    """Factory function for dependency injection."""
    return VenueRepository(db)
