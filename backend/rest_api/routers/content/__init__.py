"""
Content routers - courses, dance styles, music and venues.
- /api/courses/*, /api/lessons/*, /api/dance-styles/* - Translatable catalog
- /api/artists/*, /api/albums/*, /api/songs/* - Music library
- /api/venues/*, /api/users/*
"""

from .courses import router as courses_router
from .lessons import router as lessons_router
from .dance_styles import router as dance_styles_router
from .music import albums_router, artists_router, songs_router
from .venues import router as venues_router
from .users import router as users_router

__all__ = [
    "courses_router",
    "lessons_router",
    "dance_styles_router",
    "artists_router",
    "albums_router",
    "songs_router",
    "venues_router",
    "users_router",
]
