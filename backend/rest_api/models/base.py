"""
Base class and shared mixins for all SQLAlchemy ORM models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, DateTime, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from shared.config.constants import Limits

# SQLite only autoincrements INTEGER PRIMARY KEY columns
BigIntPK = BigInteger().with_variant(Integer, "sqlite")


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class TimestampMixin:
    """
    Mixin providing created_at / updated_at audit timestamps.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), nullable=True
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={getattr(self, 'id', None)})>"


class TranslationMixin(TimestampMixin):
    """
    Columns shared by every *_translation table.

    Each translation table adds its own foreign key to the parent entity
    and a unique constraint on (parent_id, locale).
    """

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    locale: Mapped[str] = mapped_column(String(Limits.MAX_LOCALE_LENGTH), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(Limits.MAX_NAME_LENGTH), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id}, locale='{self.locale}')>"
