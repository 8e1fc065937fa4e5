"""
User model: instructors, venue owners and students.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import CacheDomain, Limits, UserStatus

from .base import Base, BigIntPK, TimestampMixin

if TYPE_CHECKING:
    from .course import Course
    from .venue import Venue


class User(TimestampMixin, Base):
    """
    Platform user. Instructors own courses, owners own venues.
    """

    __tablename__ = "app_user"
    __cache_domain__ = CacheDomain.USER

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(Limits.MAX_NAME_LENGTH), nullable=False)
    display_name: Mapped[Optional[str]] = mapped_column(String(Limits.MAX_NAME_LENGTH))
    image: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=UserStatus.PENDING.value
    )

    # Relationships
    courses: Mapped[list["Course"]] = relationship(back_populates="instructor")
    venues: Mapped[list["Venue"]] = relationship(back_populates="owner")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
