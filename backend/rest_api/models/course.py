"""
Course models: Course, CourseTranslation.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, ForeignKey, Index, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import CacheDomain, CourseLevel, Limits

from .base import Base, BigIntPK, TimestampMixin, TranslationMixin

if TYPE_CHECKING:
    from .dance_style import DanceStyle
    from .lesson import Lesson
    from .user import User


class Course(TimestampMixin, Base):
    """
    A course taught by an instructor in a given dance style.
    Name and description are per locale in CourseTranslation.
    """

    __tablename__ = "course"
    __cache_domain__ = CacheDomain.COURSE

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    slug: Mapped[str] = mapped_column(String(Limits.MAX_SLUG_LENGTH), nullable=False, unique=True)
    level: Mapped[str] = mapped_column(
        String(20), nullable=False, default=CourseLevel.BEGINNER.value, index=True
    )
    # Total duration in minutes
    duration: Mapped[Optional[int]] = mapped_column(Integer)
    price: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2))
    instructor_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("app_user.id", ondelete="SET NULL"), index=True
    )
    dance_style_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("dance_style.id", ondelete="SET NULL"), index=True
    )

    # Relationships
    translations: Mapped[list["CourseTranslation"]] = relationship(
        back_populates="course", cascade="all, delete-orphan"
    )
    instructor: Mapped[Optional["User"]] = relationship(back_populates="courses")
    dance_style: Mapped[Optional["DanceStyle"]] = relationship(back_populates="courses")
    lessons: Mapped[list["Lesson"]] = relationship(
        back_populates="course", cascade="all, delete-orphan", order_by="Lesson.position"
    )

    __table_args__ = (
        Index("ix_course_style_level", "dance_style_id", "level"),
    )


class CourseTranslation(TranslationMixin, Base):
    __tablename__ = "course_translation"

    course_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("course.id", ondelete="CASCADE"), nullable=False, index=True
    )

    course: Mapped["Course"] = relationship(back_populates="translations")

    __table_args__ = (
        UniqueConstraint("course_id", "locale", name="uq_course_translation_locale"),
    )
