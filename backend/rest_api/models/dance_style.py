"""
Dance style models: DanceStyle, DanceStyleTranslation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import CacheDomain, Limits

from .base import Base, BigIntPK, TimestampMixin, TranslationMixin

if TYPE_CHECKING:
    from .course import Course


class DanceStyle(TimestampMixin, Base):
    """
    A dance style (salsa, bachata, tango...). Name and description live in
    DanceStyleTranslation, one row per locale.
    """

    __tablename__ = "dance_style"
    __cache_domain__ = CacheDomain.DANCE_STYLE

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    slug: Mapped[str] = mapped_column(String(Limits.MAX_SLUG_LENGTH), nullable=False, unique=True)

    # Relationships
    translations: Mapped[list["DanceStyleTranslation"]] = relationship(
        back_populates="dance_style", cascade="all, delete-orphan"
    )
    courses: Mapped[list["Course"]] = relationship(back_populates="dance_style")


class DanceStyleTranslation(TranslationMixin, Base):
    __tablename__ = "dance_style_translation"

    dance_style_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("dance_style.id", ondelete="CASCADE"), nullable=False, index=True
    )

    dance_style: Mapped["DanceStyle"] = relationship(back_populates="translations")

    __table_args__ = (
        UniqueConstraint("dance_style_id", "locale", name="uq_dance_style_translation_locale"),
    )
