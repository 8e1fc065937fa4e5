"""
Venue model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, Boolean, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import CacheDomain, Limits

from .base import Base, BigIntPK, TimestampMixin

if TYPE_CHECKING:
    from .user import User


class Venue(TimestampMixin, Base):
    """
    A place where classes and events happen.
    """

    __tablename__ = "venue"
    __cache_domain__ = CacheDomain.VENUE

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(Limits.MAX_NAME_LENGTH), nullable=False)
    slug: Mapped[str] = mapped_column(String(Limits.MAX_SLUG_LENGTH), nullable=False, unique=True)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    capacity: Mapped[Optional[int]] = mapped_column(Integer)
    has_parking: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    owner_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("app_user.id", ondelete="SET NULL"), index=True
    )

    owner: Mapped[Optional["User"]] = relationship(back_populates="venues")

    __table_args__ = (
        Index("ix_venue_country_city", "country", "city"),
    )
