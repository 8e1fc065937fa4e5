"""
Repository Pattern implementation.
Centralizes data access: allow-listed filters and sorts, eager loading,
locale-aware translations.

Usage:
    from rest_api.repositories import get_course_repository

    repo = get_course_repository(db)
    page = repo.paginate(PaginatedRequest(filter='{"field": "level", "value": "beginner"}'))
    view = repo.find_by_id(123, locale="fr")
"""

from .base import BaseRepository, QueryBuilder
from .translatable import TranslatableRepository, TranslatableView, resolve_translation
from .course import CourseRepository, COURSE_FIELDS, get_course_repository
from .lesson import LessonRepository, LESSON_FIELDS, get_lesson_repository
from .dance_style import DanceStyleRepository, DANCE_STYLE_FIELDS, get_dance_style_repository
from .music import (
    ArtistRepository,
    AlbumRepository,
    SongRepository,
    get_artist_repository,
    get_album_repository,
    get_song_repository,
)
from .venue import VenueRepository, get_venue_repository
from .user import UserRepository, get_user_repository

__all__ = [
    # Base
    "BaseRepository",
    "QueryBuilder",
    "TranslatableRepository",
    "TranslatableView",
    "resolve_translation",
    # Course
    "CourseRepository",
    "COURSE_FIELDS",
    "get_course_repository",
    # Lesson
    "LessonRepository",
    "LESSON_FIELDS",
    "get_lesson_repository",
    # Dance style
    "DanceStyleRepository",
    "DANCE_STYLE_FIELDS",
    "get_dance_style_repository",
    # Music
    "ArtistRepository",
    "AlbumRepository",
    "SongRepository",
    "get_artist_repository",
    "get_album_repository",
    "get_song_repository",
    # Venue / User
    "VenueRepository",
    "UserRepository",
    "get_venue_repository",
    "get_user_repository",
]
