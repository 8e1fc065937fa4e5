"""
CORS configuration for browser clients of the API.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config.settings import settings
from shared.infrastructure.correlation import REQUEST_ID_HEADER


# Read-heavy API: listings and lookups plus CRUD writes
ALLOWED_METHODS = ["GET", "POST", "PATCH", "DELETE", "OPTIONS"]

ALLOWED_HEADERS = [
    "Content-Type",
    "Accept",
    "Accept-Language",
    REQUEST_ID_HEADER,
]


def configure_cors(app: FastAPI) -> None:
    """
    Add CORSMiddleware using ``settings.cors_origins``.

    ALLOWED_ORIGINS (comma-separated) is required in production; development
    falls back to the localhost frontends and disables preflight caching.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
        expose_headers=[REQUEST_ID_HEADER],
        max_age=0 if settings.environment == "development" else settings.cors_max_age,
    )
