"""
User Repository.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from shared.query.filters import EntityFields, FieldType

from rest_api.models import User
from .base import BaseRepository

USER_FIELDS = EntityFields(
    entity="User",
    columns={
        "id": FieldType.INTEGER,
        "email": FieldType.TEXT,
        "name": FieldType.TEXT,
        "display_name": FieldType.TEXT,
        "status": FieldType.TEXT,
        "created_at": FieldType.DATETIME,
    },
    search_fields=("name", "email"),
)


class UserRepository(BaseRepository[User]):
    """Repository for User entities."""

    @property
    def model(self) -> type[User]:
        return User

    @property
    def fields(self) -> EntityFields:
        return USER_FIELDS

    def find_by_email(self, email: str) -> User | None:
        return self._db.scalar(select(User).where(User.email == email.strip().lower()))


def get_user_repository(db: Session) -> UserRepository:
    """Factory function for dependency injection."""
    return UserRepository(db)
