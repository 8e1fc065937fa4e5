"""
Shared Pydantic schemas used across the application.

Wire format is camelCase (``instructorId``); snake_case is accepted on input.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, EmailStr, Field
from pydantic.alias_generators import to_camel

from shared.config.constants import Limits


# =============================================================================
# Common Types
# =============================================================================

CourseLevelLiteral = Literal["beginner", "intermediate", "advanced"]
UserStatusLiteral = Literal["active", "pending", "suspended"]

# Related records attached through ?with=... are plain camelCase dicts
RelatedOne = dict[str, Any]
RelatedMany = list[dict[str, Any]]


class CamelModel(BaseModel):
    """Base for API schemas: camelCase aliases, ORM attribute access."""

    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel,
        "from_attributes": True,
    }


# =============================================================================
# Translations
# =============================================================================


class TranslationInput(CamelModel):
    """One locale's localized fields."""

    locale: str = Field(min_length=2, max_length=Limits.MAX_LOCALE_LENGTH)
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)


class LessonTranslationInput(TranslationInput):
    content: str | None = None


class TranslationOutput(CamelModel):
    id: int
    locale: str
    name: str
    description: str | None = None


class LessonTranslationOutput(TranslationOutput):
    content: str | None = None


class TranslatableOutput(CamelModel):
    """
    Mixin fields for translatable entities.

    ``translation`` is the locale-resolved translation; ``translations``
    is present only when all translations were requested.
    """

    translation: TranslationOutput | None = None
    translations: dict[str, TranslationOutput] | None = None


# =============================================================================
# Users
# =============================================================================


class UserCreate(CamelModel):
    email: EmailStr
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    display_name: str | None = Field(default=None, max_length=Limits.MAX_NAME_LENGTH)
    image: str | None = None
    status: UserStatusLiteral = "pending"


class UserUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    display_name: str | None = Field(default=None, max_length=Limits.MAX_NAME_LENGTH)
    image: str | None = None
    status: UserStatusLiteral | None = None


class UserOutput(CamelModel):
    id: int
    email: str
    name: str
    display_name: str | None = None
    image: str | None = None
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    courses: RelatedMany | None = None
    venues: RelatedMany | None = None


# =============================================================================
# Dance Styles
# =============================================================================


class DanceStyleCreate(CamelModel):
    slug: str = Field(min_length=1, max_length=Limits.MAX_SLUG_LENGTH)
    translations: list[TranslationInput] = Field(default_factory=list)


class DanceStyleUpdate(CamelModel):
    slug: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_SLUG_LENGTH)
    translations: list[TranslationInput] | None = None


class DanceStyleOutput(TranslatableOutput):
    id: int
    slug: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    courses: RelatedMany | None = None


# =============================================================================
# Courses
# =============================================================================


class CourseCreate(CamelModel):
    slug: str = Field(min_length=1, max_length=Limits.MAX_SLUG_LENGTH)
    level: CourseLevelLiteral = "beginner"
    duration: int | None = Field(default=None, ge=0)
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    instructor_id: int | None = None
    dance_style_id: int | None = None
    translations: list[TranslationInput] = Field(default_factory=list)


class CourseUpdate(CamelModel):
    slug: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_SLUG_LENGTH)
    level: CourseLevelLiteral | None = None
    duration: int | None = Field(default=None, ge=0)
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    instructor_id: int | None = None
    dance_style_id: int | None = None
    translations: list[TranslationInput] | None = None


class CourseOutput(TranslatableOutput):
    id: int
    slug: str
    level: str
    duration: int | None = None
    price: Decimal | None = None
    instructor_id: int | None = None
    dance_style_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    instructor: RelatedOne | None = None
    dance_style: RelatedOne | None = None
    lessons: RelatedMany | None = None


# =============================================================================
# Lessons
# =============================================================================


class LessonCreate(CamelModel):
    course_id: int
    position: int = Field(default=0, ge=0)
    duration: int | None = Field(default=None, ge=0)
    video_url: str | None = None
    translations: list[LessonTranslationInput] = Field(default_factory=list)


class LessonUpdate(CamelModel):
    course_id: int | None = None
    position: int | None = Field(default=None, ge=0)
    duration: int | None = Field(default=None, ge=0)
    video_url: str | None = None
    translations: list[LessonTranslationInput] | None = None


class LessonOutput(CamelModel):
    id: int
    course_id: int
    position: int
    duration: int | None = None
    video_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    translation: LessonTranslationOutput | None = None
    translations: dict[str, LessonTranslationOutput] | None = None
    course: RelatedOne | None = None


# =============================================================================
# Music
# =============================================================================


class ArtistCreate(CamelModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    country: str | None = Field(default=None, max_length=100)
    bio: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)


class ArtistUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    country: str | None = Field(default=None, max_length=100)
    bio: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)


class ArtistOutput(CamelModel):
    id: int
    name: str
    country: str | None = None
    bio: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    albums: RelatedMany | None = None


class AlbumCreate(CamelModel):
    artist_id: int
    title: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    release_year: int | None = Field(default=None, ge=1900, le=2100)


class AlbumUpdate(CamelModel):
    artist_id: int | None = None
    title: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    release_year: int | None = Field(default=None, ge=1900, le=2100)


class AlbumOutput(CamelModel):
    id: int
    artist_id: int
    title: str
    release_year: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    artist: RelatedOne | None = None
    songs: RelatedMany | None = None


class SongCreate(CamelModel):
    album_id: int
    title: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    duration: int | None = Field(default=None, ge=0)


class SongUpdate(CamelModel):
    album_id: int | None = None
    title: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    duration: int | None = Field(default=None, ge=0)


class SongOutput(CamelModel):
    id: int
    album_id: int
    title: str
    duration: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    album: RelatedOne | None = None


# =============================================================================
# Venues
# =============================================================================


class VenueCreate(CamelModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    slug: str = Field(min_length=1, max_length=Limits.MAX_SLUG_LENGTH)
    address: str = Field(min_length=1)
    city: str = Field(min_length=1, max_length=100)
    country: str = Field(min_length=1, max_length=100)
    capacity: int | None = Field(default=None, ge=0)
    has_parking: bool = False
    owner_id: int | None = None


class VenueUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    address: str | None = Field(default=None, min_length=1)
    city: str | None = Field(default=None, min_length=1, max_length=100)
    country: str | None = Field(default=None, min_length=1, max_length=100)
    capacity: int | None = Field(default=None, ge=0)
    has_parking: bool | None = None
    owner_id: int | None = None


class VenueOutput(CamelModel):
    id: int
    name: str
    slug: str
    address: str
    city: str
    country: str
    capacity: int | None = None
    has_parking: bool = False
    owner_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    owner: RelatedOne | None = None


# =============================================================================
# Health
# =============================================================================


class HealthOutput(BaseModel):
    status: Literal["ok", "degraded"]
    database: bool
    cache: bool
