"""
Music catalog models: Artist, Album, Song.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import BigInteger, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import CacheDomain, Limits

from .base import Base, BigIntPK, TimestampMixin


class Artist(TimestampMixin, Base):
    __tablename__ = "artist"
    __cache_domain__ = CacheDomain.ARTIST

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(String(Limits.MAX_NAME_LENGTH), nullable=False, index=True)
    country: Mapped[Optional[str]] = mapped_column(String(100))
    bio: Mapped[Optional[str]] = mapped_column(Text)

    albums: Mapped[list["Album"]] = relationship(
        back_populates="artist", cascade="all, delete-orphan"
    )


class Album(TimestampMixin, Base):
    __tablename__ = "album"
    __cache_domain__ = CacheDomain.ALBUM

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    artist_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("artist.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(Limits.MAX_NAME_LENGTH), nullable=False)
    release_year: Mapped[Optional[int]] = mapped_column(Integer)

    artist: Mapped["Artist"] = relationship(back_populates="albums")
    songs: Mapped[list["Song"]] = relationship(
        back_populates="album", cascade="all, delete-orphan"
    )


class Song(TimestampMixin, Base):
    __tablename__ = "song"
    __cache_domain__ = CacheDomain.SONG

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    album_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("album.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(Limits.MAX_NAME_LENGTH), nullable=False)
    # Duration in seconds
    duration: Mapped[Optional[int]] = mapped_column(Integer)

    album: Mapped["Album"] = relationship(back_populates="songs")
