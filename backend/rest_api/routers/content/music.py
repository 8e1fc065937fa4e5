"""
Music endpoints - artists, albums and songs.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from rest_api.routers._common import get_cache, get_paginated_request, parse_with_param
from rest_api.services.domain import AlbumService, ArtistService, SongService
from shared.infrastructure.cache import CacheClient
from shared.infrastructure.db import get_db
from shared.query.pagination import PaginatedRequest, PaginatedResponse
from shared.utils.schemas import (
    AlbumCreate,
    AlbumOutput,
    AlbumUpdate,
    ArtistCreate,
    ArtistOutput,
    ArtistUpdate,
    SongCreate,
    SongOutput,
    SongUpdate,
)


artists_router = APIRouter(prefix="/api/artists", tags=["music"])
albums_router = APIRouter(prefix="/api/albums", tags=["music"])
songs_router = APIRouter(prefix="/api/songs", tags=["music"])


def get_artist_service(
    db: Session = Depends(get_db),
    cache: CacheClient = Depends(get_cache),
) -> ArtistService:
    return ArtistService(db, cache)


def get_album_service(
    db: Session = Depends(get_db),
    cache: CacheClient = Depends(get_cache),
) -> AlbumService:
    return AlbumService(db, cache)


def get_song_service(
    db: Session = Depends(get_db),
    cache: CacheClient = Depends(get_cache),
) -> SongService:
    return SongService(db, cache)


# =============================================================================
# Artists
# =============================================================================


@artists_router.get(
    "",
    response_model=PaginatedResponse[ArtistOutput],
    response_model_exclude_unset=True,
)
def list_artists(
    request: PaginatedRequest = Depends(get_paginated_request),
    service: ArtistService = Depends(get_artist_service),
) -> dict[str, Any]:
    """List artists. ``with=albums.songs`` embeds the discography."""
    return service.paginate(request)


@artists_router.get("/{artist_id}", response_model=ArtistOutput, response_model_exclude_unset=True)
def get_artist(
    artist_id: int,
    relations: str | None = Query(default=None, alias="with"),
    service: ArtistService = Depends(get_artist_service),
) -> dict[str, Any]:
    return service.get(artist_id, relations=parse_with_param(relations))


@artists_router.post(
    "",
    response_model=ArtistOutput,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
def create_artist(
    body: ArtistCreate,
    service: ArtistService = Depends(get_artist_service),
) -> dict[str, Any]:
    return service.create(body.model_dump())


@artists_router.patch("/{artist_id}", response_model=ArtistOutput, response_model_exclude_unset=True)
def update_artist(
    artist_id: int,
    body: ArtistUpdate,
    service: ArtistService = Depends(get_artist_service),
) -> dict[str, Any]:
    return service.update(artist_id, body.model_dump(exclude_unset=True))


@artists_router.delete("/{artist_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_artist(
    artist_id: int,
    service: ArtistService = Depends(get_artist_service),
) -> None:
    service.delete(artist_id)


# =============================================================================
# Albums
# =============================================================================


@albums_router.get(
    "",
    response_model=PaginatedResponse[AlbumOutput],
    response_model_exclude_unset=True,
)
def list_albums(
    request: PaginatedRequest = Depends(get_paginated_request),
    service: AlbumService = Depends(get_album_service),
) -> dict[str, Any]:
    return service.paginate(request)


@albums_router.get("/{album_id}", response_model=AlbumOutput, response_model_exclude_unset=True)
def get_album(
    album_id: int,
    relations: str | None = Query(default=None, alias="with"),
    service: AlbumService = Depends(get_album_service),
) -> dict[str, Any]:
    return service.get(album_id, relations=parse_with_param(relations))


@albums_router.post(
    "",
    response_model=AlbumOutput,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
def create_album(
    body: AlbumCreate,
    service: AlbumService = Depends(get_album_service),
) -> dict[str, Any]:
    return service.create(body.model_dump())


@albums_router.patch("/{album_id}", response_model=AlbumOutput, response_model_exclude_unset=True)
def update_album(
    album_id: int,
    body: AlbumUpdate,
    service: AlbumService = Depends(get_album_service),
) -> dict[str, Any]:
    return service.update(album_id, body.model_dump(exclude_unset=True))


@albums_router.delete("/{album_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_album(
    album_id: int,
    service: AlbumService = Depends(get_album_service),
) -> None:
    service.delete(album_id)


# =============================================================================
# Songs
# =============================================================================


@songs_router.get(
    "",
    response_model=PaginatedResponse[SongOutput],
    response_model_exclude_unset=True,
)
def list_songs(
    request: PaginatedRequest = Depends(get_paginated_request),
    service: SongService = Depends(get_song_service),
) -> dict[str, Any]:
    return service.paginate(request)


@songs_router.get("/{song_id}", response_model=SongOutput, response_model_exclude_unset=True)
def get_song(
    song_id: int,
    relations: str | None = Query(default=None, alias="with"),
    service: SongService = Depends(get_song_service),
) -> dict[str, Any]:
    return service.get(song_id, relations=parse_with_param(relations))


@songs_router.post(
    "",
    response_model=SongOutput,
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
)
def create_song(
    body: SongCreate,
    service: SongService = Depends(get_song_service),
) -> dict[str, Any]:
    return service.create(body.model_dump())


@songs_router.patch("/{song_id}", response_model=SongOutput, response_model_exclude_unset=True)
def update_song(
    song_id: int,
    body: SongUpdate,
    service: SongService = Depends(get_song_service),
) -> dict[str, Any]:
    return service.update(song_id, body.model_dump(exclude_unset=True))


@songs_router.delete("/{song_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_song(
    song_id: int,
    service: SongService = Depends(get_song_service),
) -> None:
    service.delete(song_id)
