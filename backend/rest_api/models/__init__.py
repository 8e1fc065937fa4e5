"""
SQLAlchemy ORM Models Package.

All models are organized into domain-specific modules:
- base: Base class, TimestampMixin, TranslationMixin
- user: User
- dance_style: DanceStyle, DanceStyleTranslation
- course: Course, CourseTranslation
- lesson: Lesson, LessonTranslation
- music: Artist, Album, Song
- venue: Venue
"""

# Base classes
from .base import Base, TimestampMixin, TranslationMixin

# Users
from .user import User

# Translatable catalog
from .dance_style import DanceStyle, DanceStyleTranslation
from .course import Course, CourseTranslation
from .lesson import Lesson, LessonTranslation

# Music catalog
from .music import Artist, Album, Song

# Venues
from .venue import Venue

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "TranslationMixin",
    # User
    "User",
    # Dance style
    "DanceStyle",
    "DanceStyleTranslation",
    # Course
    "Course",
    "CourseTranslation",
    # Lesson
    "Lesson",
    "LessonTranslation",
    # Music
    "Artist",
    "Album",
    "Song",
    # Venue
    "Venue",
]
