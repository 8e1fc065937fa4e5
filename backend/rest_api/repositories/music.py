"""
Music Repositories - Artists, albums and songs.
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from shared.query.filters import EntityFields, FieldType, RelationFields

from rest_api.models import Album, Artist, Song
from .base import BaseRepository

ARTIST_FIELDS = EntityFields(
    entity="Artist",
    columns={
        "id": FieldType.INTEGER,
        "name": FieldType.TEXT,
        "country": FieldType.TEXT,
        "created_at": FieldType.DATETIME,
    },
    relations={
        "albums": RelationFields(
            columns={"title": FieldType.TEXT, "release_year": FieldType.INTEGER},
        ),
    },
    search_fields=("name",),
)

ALBUM_FIELDS = EntityFields(
    entity="Album",
    columns={
        "id": FieldType.INTEGER,
        "artist_id": FieldType.INTEGER,
        "title": FieldType.TEXT,
        "release_year": FieldType.INTEGER,
        "created_at": FieldType.DATETIME,
    },
    relations={
        "artist": RelationFields(
            columns={"name": FieldType.TEXT, "country": FieldType.TEXT},
        ),
        "songs": RelationFields(
            columns={"title": FieldType.TEXT, "duration": FieldType.INTEGER},
        ),
    },
    search_fields=("title",),
)

SONG_FIELDS = EntityFields(
    entity="Song",
    columns={
        "id": FieldType.INTEGER,
        "album_id": FieldType.INTEGER,
        "title": FieldType.TEXT,
        "duration": FieldType.INTEGER,
        "created_at": FieldType.DATETIME,
    },
    relations={
        "album": RelationFields(
            columns={"title": FieldType.TEXT, "release_year": FieldType.INTEGER},
        ),
    },
    search_fields=("title",),
)


class ArtistRepository(BaseRepository[Artist]):
    """Repository for Artist entities."""

    @property
    def model(self) -> type[Artist]:
        return Artist

    @property
    def fields(self) -> EntityFields:
        return ARTIST_FIELDS


class AlbumRepository(BaseRepository[Album]):
    """Repository for Album entities."""

    @property
    def model(self) -> type[Album]:
        return Album

    @property
    def fields(self) -> EntityFields:
        return ALBUM_FIELDS

    def find_by_artist(self, artist_id: int) -> Sequence[Album]:
        query = (
            select(Album)
            .where(Album.artist_id == artist_id)
            .order_by(Album.release_year, Album.id)
        )
        return self._db.execute(query).scalars().all()


class SongRepository(BaseRepository[Song]):
    """Repository for Song entities."""

    @property
    def model(self) -> type[Song]:
        return Song

    @property
    def fields(self) -> EntityFields:
        return SONG_FIELDS


def get_artist_repository(db: Session) -> ArtistRepository:
    """Factory function for dependency injection."""
    return ArtistRepository(db)


def get_album_repository(db: Session) -> AlbumRepository:
    """Factory function for dependency injection."""
    return AlbumRepository(db)


def get_song_repository(db: Session) -> SongRepository:
    """Factory function for dependency injection."""
    return SongRepository(db)
