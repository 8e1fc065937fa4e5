"""
Music Services - Artists, albums and songs.

Business rules:
- an album belongs to an existing artist
- a song belongs to an existing album
- parents embed their children (?with=albums.songs), so a write drops the
  cached entries of every domain that can reach it
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from rest_api.models import Album, Artist, Song
from rest_api.repositories import get_album_repository, get_artist_repository, get_song_repository
from rest_api.services.base_service import CachedCrudService
from shared.config.constants import CacheDomain
from shared.infrastructure.cache import CacheClient
from shared.utils.schemas import AlbumOutput, ArtistOutput, SongOutput


class ArtistService(CachedCrudService[Artist]):
    """Service for artist management."""

    def __init__(self, db: Session, cache: CacheClient):
        super().__init__(
            db=db,
            repository=get_artist_repository(db),
            cache=cache,
            output_schema=ArtistOutput,
            domain=CacheDomain.ARTIST,
        )


class AlbumService(CachedCrudService[Album]):
    """Service for album management."""

    def __init__(self, db: Session, cache: CacheClient):
        super().__init__(
            db=db,
            repository=get_album_repository(db),
            cache=cache,
            output_schema=AlbumOutput,
            domain=CacheDomain.ALBUM,
        )

    def _validate_create(self, data: dict[str, Any]) -> None:
        super()._validate_create(data)
        self._check_reference(Artist, data.get("artist_id"), "artistId")

    def _validate_update(self, entity_id: int, data: dict[str, Any]) -> None:
        super()._validate_update(entity_id, data)
        self._check_parent(Artist, data, "artist_id", "artistId")


class SongService(CachedCrudService[Song]):
    """Service for song management."""

    def __init__(self, db: Session, cache: CacheClient):
        super().__init__(
            db=db,
            repository=get_song_repository(db),
            cache=cache,
            output_schema=SongOutput,
            domain=CacheDomain.SONG,
        )

    def _validate_create(self, data: dict[str, Any]) -> None:
        super()._validate_create(data)
        self._check_reference(Album, data.get("album_id"), "albumId")

    def _validate_update(self, entity_id: int, data: dict[str, Any]) -> None:
        super()._validate_update(entity_id, data)
        self._check_parent(Album, data, "album_id", "albumId")
