"""
REST API main application.
Entry point for the FastAPI REST server.

Run:
    uvicorn rest_api.main:app --reload --port 8000
"""

from fastapi import FastAPI

from rest_api.core import configure_cors, lifespan, register_middlewares
from rest_api.routers.content import (
    albums_router,
    artists_router,
    courses_router,
    dance_styles_router,
    lessons_router,
    songs_router,
    users_router,
    venues_router,
)
from rest_api.routers.public import health_router


app = FastAPI(
    title="Dance Platform REST API",
    description="Courses, dance styles, music and venues with filtered, localized listings",
    version="0.1.0",
    lifespan=lifespan,
)

configure_cors(app)
register_middlewares(app)


# =============================================================================
# Routers
# =============================================================================

app.include_router(health_router)
app.include_router(courses_router)
app.include_router(lessons_router)
app.include_router(dance_styles_router)
app.include_router(artists_router)
app.include_router(albums_router)
app.include_router(songs_router)
app.include_router(venues_router)
app.include_router(users_router)
