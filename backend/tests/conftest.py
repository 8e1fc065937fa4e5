"""
Pytest configuration and fixtures for backend tests.
"""

import fnmatch
import json
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rest_api.main import app
from rest_api.models import (
    Album,
    Artist,
    Base,
    Course,
    CourseTranslation,
    DanceStyle,
    DanceStyleTranslation,
    Lesson,
    LessonTranslation,
    Song,
    User,
    Venue,
)
from rest_api.routers._common import get_cache
from shared.infrastructure.cache.keys import json_default
from shared.infrastructure.db import get_db


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE / SET NULL unless asked
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeCache:
    """
    In-memory CacheClient.

    Values go through JSON like they do in Redis, so non-serializable
    payloads fail here too. TTLs are recorded, not enforced.
    """

    def __init__(self):
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}

    def get(self, key: str) -> Any | None:
        raw = self.store.get(key)
        return None if raw is None else json.loads(raw)

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        self.store[key] = json.dumps(value, default=json_default)
        self.ttls[key] = ttl

    def delete(self, key: str) -> None:
        self.store.pop(key, None)

    def delete_by_pattern(self, pattern: str) -> int:
        matches = [key for key in self.store if fnmatch.fnmatchcase(key, pattern)]
        for key in matches:
            del self.store[key]
        return len(matches)

    def keys(self, pattern: str = "*") -> list[str]:
        return sorted(key for key in self.store if fnmatch.fnmatchcase(key, pattern))


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def cache():
    return FakeCache()


@pytest.fixture(scope="function")
def client(db_session, cache):
    """
    Create a test client with database session and cache overrides.

    The lifespan is not started: tables already exist on the test engine.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache

    yield TestClient(app)

    app.dependency_overrides.clear()


# =============================================================================
# Seed data
# =============================================================================


@pytest.fixture
def seed_instructor(db_session):
    user = User(email="maria@example.com", name="Maria Lopez", status="active")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def seed_dance_style(db_session):
    style = DanceStyle(slug="salsa")
    style.translations = [
        DanceStyleTranslation(locale="en", name="Salsa"),
        DanceStyleTranslation(locale="es", name="Salsa cubana"),
    ]
    db_session.add(style)
    db_session.commit()
    db_session.refresh(style)
    return style


@pytest.fixture
def seed_courses(db_session, seed_instructor, seed_dance_style):
    """
    Three courses:
    - salsa-basics: en + fr translations
    - bachata-flow: en only
    - tango-night: es only (no default-locale translation)
    """
    salsa = Course(
        slug="salsa-basics",
        level="beginner",
        duration=90,
        instructor_id=seed_instructor.id,
        dance_style_id=seed_dance_style.id,
    )
    salsa.translations = [
        CourseTranslation(locale="en", name="Salsa Basics", description="First steps"),
        CourseTranslation(locale="fr", name="Les bases de la salsa"),
    ]
    salsa.lessons = [
        Lesson(position=1, duration=30, translations=[LessonTranslation(locale="en", name="Timing")]),
        Lesson(position=2, duration=30, translations=[LessonTranslation(locale="en", name="Turns")]),
    ]

    bachata = Course(slug="bachata-flow", level="intermediate", duration=60)
    bachata.translations = [CourseTranslation(locale="en", name="Bachata Flow")]

    tango = Course(slug="tango-night", level="advanced", duration=120, instructor_id=seed_instructor.id)
    tango.translations = [CourseTranslation(locale="es", name="Noche de tango")]

    db_session.add_all([salsa, bachata, tango])
    db_session.commit()
    for course in (salsa, bachata, tango):
        db_session.refresh(course)
    return {"salsa": salsa, "bachata": bachata, "tango": tango}


@pytest.fixture
def seed_music(db_session):
    artist = Artist(name="Celia Cruz", country="Cuba")
    album = Album(title="Azucar", release_year=1974, artist=artist)
    album.songs = [Song(title="Guantanamera", duration=210), Song(title="Bemba colora", duration=300)]
    other = Artist(name="Romeo Santos", country="USA")
    db_session.add_all([artist, other])
    db_session.commit()
    db_session.refresh(artist)
    db_session.refresh(album)
    return {"artist": artist, "album": album, "other": other}


@pytest.fixture
def seed_venue(db_session, seed_instructor):
    venue = Venue(
        name="Studio 54",
        slug="studio-54",
        address="54 W 54th St",
        city="New York",
        country="USA",
        capacity=120,
        has_parking=False,
        owner_id=seed_instructor.id,
    )
    db_session.add(venue)
    db_session.commit()
    db_session.refresh(venue)
    return venue
