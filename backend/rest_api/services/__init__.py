"""
Services module for business logic.

- domain/: Entity services (caching, transactions, business rules)
- base_service: CachedCrudService / TranslatableCrudService bases
- output_builder: model -> camelCase wire dict

Usage:
    from rest_api.services.domain import CourseService
    service = CourseService(db, cache)
    course = service.get(42, locale="fr", relations=["instructor"])
"""

from .base_service import CachedCrudService, TranslatableCrudService
from .output_builder import build_output, column_values
from .domain import (
    CourseService,
    LessonService,
    DanceStyleService,
    ArtistService,
    AlbumService,
    SongService,
    VenueService,
    UserService,
)

__all__ = [
    # Base service classes
    "CachedCrudService",
    "TranslatableCrudService",
    "build_output",
    "column_values",
    # Domain services
    "CourseService",
    "LessonService",
    "DanceStyleService",
    "ArtistService",
    "AlbumService",
    "SongService",
    "VenueService",
    "UserService",
]
