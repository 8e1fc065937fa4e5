"""
Lesson models: Lesson, LessonTranslation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import CacheDomain

from .base import Base, BigIntPK, TimestampMixin, TranslationMixin

if TYPE_CHECKING:
    from .course import Course


class Lesson(TimestampMixin, Base):
    """
    A single lesson inside a course, ordered by position.
    """

    __tablename__ = "lesson"
    __cache_domain__ = CacheDomain.LESSON

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    course_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("course.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Duration in seconds
    duration: Mapped[Optional[int]] = mapped_column(Integer)
    video_url: Mapped[Optional[str]] = mapped_column(Text)

    # Relationships
    course: Mapped["Course"] = relationship(back_populates="lessons")
    translations: Mapped[list["LessonTranslation"]] = relationship(
        back_populates="lesson", cascade="all, delete-orphan"
    )


class LessonTranslation(TranslationMixin, Base):
    __tablename__ = "lesson_translation"

    lesson_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("lesson.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content: Mapped[Optional[str]] = mapped_column(Text)

    lesson: Mapped["Lesson"] = relationship(back_populates="translations")

    __table_args__ = (
        UniqueConstraint("lesson_id", "locale", name="uq_lesson_translation_locale"),
    )
