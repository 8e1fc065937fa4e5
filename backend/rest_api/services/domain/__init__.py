"""
Domain Services - Business logic per entity.

Routers stay thin and delegate to these services:
    Router -> Service (cache, transaction) -> Repository -> Model

Usage:
    from rest_api.services.domain import CourseService

    service = CourseService(db, cache)
    page = service.paginate(request)
"""

from .course_service import CourseService
from .lesson_service import LessonService
from .dance_style_service import DanceStyleService
from .music_service import AlbumService, ArtistService, SongService
from .venue_service import VenueService
from .user_service import UserService

__all__ = [
    "CourseService",
    "LessonService",
    "DanceStyleService",
    "ArtistService",
    "AlbumService",
    "SongService",
    "VenueService",
    "UserService",
]
