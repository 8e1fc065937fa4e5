"""
Tests for domain services: read-through caching and invalidate-on-write.
"""

import pytest

from rest_api.models import Course, Song
from rest_api.services.base_service import embedding_domains
from rest_api.services.domain import (
    AlbumService,
    ArtistService,
    CourseService,
    LessonService,
    SongService,
    UserService,
    VenueService,
)
from shared.config.constants import CacheDomain
from shared.config.settings import settings
from shared.infrastructure.cache import CacheKeyBuilder
from shared.query.pagination import PaginatedRequest
from shared.utils.exceptions import DuplicateEntityError, NotFoundError, ValidationError


class TestCourseServiceReads:

    def test_get_resolves_locale_and_caches(self, db_session, cache, seed_courses):
        service = CourseService(db_session, cache)
        course_id = seed_courses["bachata"].id

        result = service.get(course_id, locale="fr")

        assert result["slug"] == "bachata-flow"
        assert result["translation"]["locale"] == "en"
        assert "translations" not in result
        assert "instructor" not in result
        assert cache.keys(f"course:id:{course_id}:*")
        assert cache.ttls[cache.keys(f"course:id:{course_id}:*")[0]] == settings.cache_ttl_medium

    def test_get_with_relations_is_camel_case(self, db_session, cache, seed_courses, seed_instructor):
        service = CourseService(db_session, cache)
        result = service.get(seed_courses["salsa"].id, relations=["instructor", "lessons"])

        assert result["instructorId"] == seed_instructor.id
        assert result["instructor"]["email"] == "maria@example.com"
        assert [lesson["position"] for lesson in result["lessons"]] == [1, 2]
        assert result["lessons"][0]["courseId"] == seed_courses["salsa"].id

    def test_get_all_translations(self, db_session, cache, seed_courses):
        result = CourseService(db_session, cache).get(
            seed_courses["salsa"].id, include_all_translations=True
        )
        assert sorted(result["translations"]) == ["en", "fr"]
        assert result["translations"]["fr"]["name"] == "Les bases de la salsa"

    def test_missing_is_not_cached(self, db_session, cache):
        with pytest.raises(NotFoundError):
            CourseService(db_session, cache).get(404)
        assert cache.keys() == []

    def test_paginate_is_served_from_cache(self, db_session, cache, seed_courses):
        service = CourseService(db_session, cache)
        request = PaginatedRequest(sort="slug")

        first = service.paginate(request)
        seed_courses["tango"].duration = 10
        db_session.commit()
        second = service.paginate(request)

        assert first == second
        assert first["totalPages"] == 1
        assert [item["slug"] for item in first["data"]] == ["bachata-flow", "salsa-basics", "tango-night"]
        key = service.keys.paginated(request)
        assert cache.ttls[key] == min(settings.cache_ttl_medium, settings.cache_ttl_short)

    def test_invalid_request_never_touches_cache(self, db_session, cache, seed_courses):
        service = CourseService(db_session, cache)
        with pytest.raises(ValidationError) as exc_info:
            service.paginate(PaginatedRequest(filter={"field": "nonexistentField", "value": 1}))
        assert exc_info.value.field == "nonexistentField"
        assert cache.keys() == []

    @pytest.mark.parametrize("raw", ["2024", "true", "null"])
    def test_json_scalar_filter_is_a_search_term(self, db_session, cache, seed_courses, raw):
        service = CourseService(db_session, cache)
        service.create(
            {"slug": f"congress-{raw}", "translations": [{"locale": "en", "name": f"Salsa congress {raw}"}]}
        )

        result = service.paginate(PaginatedRequest(filter=raw))

        assert result["total"] == 1
        assert result["data"][0]["slug"] == f"congress-{raw}"


class TestCourseServiceWrites:

    def test_update_invalidates_cached_pages(self, db_session, cache, seed_courses):
        service = CourseService(db_session, cache)
        course_id = seed_courses["salsa"].id
        request = PaginatedRequest()
        service.paginate(request)
        service.get(course_id, locale="fr")
        page_key = service.keys.paginated(request)
        assert cache.get(page_key) is not None

        result = service.update(course_id, {"duration": 45})

        assert result["duration"] == 45
        assert cache.get(page_key) is None
        assert cache.keys(f"course:id:{course_id}*") == []

    def test_update_upserts_translations(self, db_session, cache, seed_courses):
        service = CourseService(db_session, cache)
        course_id = seed_courses["bachata"].id

        result = service.update(
            course_id, {"translations": [{"locale": "es", "name": "Bachata fluida"}]}
        )

        assert sorted(result["translations"]) == ["en", "es"]
        assert service.get(course_id, locale="es")["translation"]["name"] == "Bachata fluida"

    def test_create_with_translations(self, db_session, cache, seed_instructor, seed_dance_style):
        service = CourseService(db_session, cache)
        result = service.create(
            {
                "slug": "Kizomba-101",
                "level": "beginner",
                "instructor_id": seed_instructor.id,
                "dance_style_id": seed_dance_style.id,
                "translations": [
                    {"locale": "en", "name": "Kizomba 101"},
                    {"locale": "pt", "name": "Kizomba para iniciantes"},
                ],
            }
        )
        assert result["slug"] == "kizomba-101"
        assert result["translation"]["name"] == "Kizomba 101"
        assert sorted(result["translations"]) == ["en", "pt"]

    def test_create_rejects_missing_instructor(self, db_session, cache):
        with pytest.raises(ValidationError) as exc_info:
            CourseService(db_session, cache).create({"slug": "ghost", "instructor_id": 999})
        assert exc_info.value.field == "instructorId"

    def test_create_rejects_duplicate_slug(self, db_session, cache, seed_courses):
        with pytest.raises(DuplicateEntityError) as exc_info:
            CourseService(db_session, cache).create({"slug": "salsa-basics"})
        assert exc_info.value.field == "slug"

    def test_create_rejects_bad_slug(self, db_session, cache):
        with pytest.raises(ValidationError) as exc_info:
            CourseService(db_session, cache).create({"slug": "no spaces allowed!"})
        assert exc_info.value.field == "slug"

    def test_write_invalidates_related_domains(self, db_session, cache, seed_courses, seed_dance_style):
        style_keys = CacheKeyBuilder(CacheDomain.DANCE_STYLE)
        cache.set(style_keys.by_id(seed_dance_style.id, "with"), {"courses": []})
        cache.set(style_keys.paginated(PaginatedRequest()), {"data": []})

        CourseService(db_session, cache).update(seed_courses["salsa"].id, {"level": "advanced"})

        assert cache.keys("dance_style:*") == []

    def test_delete(self, db_session, cache, seed_courses):
        service = CourseService(db_session, cache)
        course_id = seed_courses["tango"].id
        service.get(course_id)

        service.delete(course_id)

        assert cache.keys("course:*") == []
        with pytest.raises(NotFoundError):
            service.get(course_id)

    def test_delete_translation(self, db_session, cache, seed_courses):
        service = CourseService(db_session, cache)
        course_id = seed_courses["salsa"].id
        service.get(course_id, locale="fr")

        assert service.delete_translation(course_id, "fr") is True
        assert service.get(course_id, locale="fr")["translation"]["locale"] == "en"
        assert service.delete_translation(course_id, "fr") is False

    def test_delete_translation_missing_course(self, db_session, cache):
        with pytest.raises(NotFoundError):
            CourseService(db_session, cache).delete_translation(999, "en")


class TestOtherServices:

    def test_lesson_write_invalidates_course_listings(self, db_session, cache, seed_courses):
        course_service = CourseService(db_session, cache)
        request = PaginatedRequest(relations=["lessons"])
        course_service.paginate(request)

        lesson = LessonService(db_session, cache).create(
            {
                "course_id": seed_courses["salsa"].id,
                "position": 3,
                "translations": [{"locale": "en", "name": "Shines", "content": "Footwork"}],
            }
        )

        assert lesson["translation"]["content"] == "Footwork"
        assert cache.get(course_service.keys.paginated(request)) is None
        refreshed = course_service.paginate(request)
        assert [l["position"] for l in refreshed["data"][0]["lessons"]] == [1, 2, 3]

    def test_course_write_invalidates_lesson_listings(self, db_session, cache, seed_courses):
        lesson_service = LessonService(db_session, cache)
        request = PaginatedRequest(relations=["course"])
        assert {l["course"]["slug"] for l in lesson_service.paginate(request)["data"]} == {"salsa-basics"}

        CourseService(db_session, cache).update(seed_courses["salsa"].id, {"slug": "salsa-renamed"})

        assert cache.keys("lesson:*") == []
        refreshed = lesson_service.paginate(request)
        assert {l["course"]["slug"] for l in refreshed["data"]} == {"salsa-renamed"}

    def test_song_write_invalidates_artist_entries(self, db_session, cache, seed_music):
        artist_service = ArtistService(db_session, cache)
        artist_id = seed_music["artist"].id
        artist_service.get(artist_id, relations=["albums.songs"])
        assert cache.keys("artist:*") != []

        song_id = seed_music["album"].songs[0].id
        SongService(db_session, cache).update(song_id, {"title": "La Guantanamera"})

        assert cache.keys("artist:*") == []
        songs = artist_service.get(artist_id, relations=["albums.songs"])["albums"][0]["songs"]
        assert "La Guantanamera" in [s["title"] for s in songs]

    def test_embedding_domains_follow_relationships_transitively(self):
        assert {"artist", "album", "song"} <= set(embedding_domains(Song))
        assert {"course", "lesson", "dance_style", "user", "venue"} <= set(embedding_domains(Course))
        assert "song" not in embedding_domains(Course)

    def test_lesson_requires_existing_course(self, db_session, cache):
        with pytest.raises(ValidationError) as exc_info:
            LessonService(db_session, cache).create({"course_id": 999})
        assert exc_info.value.field == "courseId"

    def test_album_requires_existing_artist(self, db_session, cache):
        with pytest.raises(ValidationError):
            AlbumService(db_session, cache).create({"artist_id": 999, "title": "Nothing"})

    @pytest.mark.parametrize(
        "service_class, fixture_key, data, field",
        [
            (AlbumService, "album", {"artist_id": 999}, "artistId"),
            (AlbumService, "album", {"artist_id": None}, "artistId"),
            (SongService, "song", {"album_id": 999}, "albumId"),
        ],
    )
    def test_music_update_checks_parent(self, db_session, cache, seed_music, service_class, fixture_key, data, field):
        entity_id = seed_music["album"].id if fixture_key == "album" else seed_music["album"].songs[0].id
        with pytest.raises(ValidationError) as exc_info:
            service_class(db_session, cache).update(entity_id, data)
        assert exc_info.value.field == field

    def test_lesson_update_checks_course(self, db_session, cache, seed_courses):
        lesson_id = seed_courses["salsa"].lessons[0].id
        with pytest.raises(ValidationError) as exc_info:
            LessonService(db_session, cache).update(lesson_id, {"course_id": 999})
        assert exc_info.value.field == "courseId"

    def test_artist_nested_relations(self, db_session, cache, seed_music):
        result = ArtistService(db_session, cache).get(seed_music["artist"].id, relations=["albums.songs"])
        assert result["albums"][0]["title"] == "Azucar"
        assert result["albums"][0]["releaseYear"] == 1974
        assert len(result["albums"][0]["songs"]) == 2

    def test_artist_search(self, db_session, cache, seed_music):
        page = ArtistService(db_session, cache).paginate(PaginatedRequest(filter="romeo"))
        assert [a["name"] for a in page["data"]] == ["Romeo Santos"]

    def test_user_email_normalized_and_unique(self, db_session, cache):
        service = UserService(db_session, cache)
        user = service.create({"email": " Ana@Example.com ", "name": "Ana"})
        assert user["email"] == "ana@example.com"
        assert user["status"] == "pending"

        with pytest.raises(DuplicateEntityError):
            service.create({"email": "ANA@example.com", "name": "Ana again"})

    def test_venue_owner_must_exist(self, db_session, cache):
        with pytest.raises(ValidationError) as exc_info:
            VenueService(db_session, cache).create(
                {
                    "name": "Hall",
                    "slug": "hall",
                    "address": "1 Main St",
                    "city": "Lima",
                    "country": "Peru",
                    "owner_id": 999,
                }
            )
        assert exc_info.value.field == "ownerId"

    def test_venue_filter_boolean(self, db_session, cache, seed_venue):
        service = VenueService(db_session, cache)
        assert service.paginate(PaginatedRequest(filter={"field": "hasParking", "value": False}))["total"] == 1
        assert service.paginate(PaginatedRequest(filter={"field": "hasParking", "value": True}))["total"] == 0
