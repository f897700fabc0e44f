"""Pytest fixtures."""

import os
import uuid

TEST_DATABASE_URL = "sqlite:///./test.db"

# Settings are read at import time; point the app at the test database first.
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["ENVIRONMENT"] = "development"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from cineconnect import models  # noqa: E402,F401 - register for create_all
from cineconnect.db.base import Base  # noqa: E402
from cineconnect.db.session import build_engine, get_db  # noqa: E402
from cineconnect.main import app  # noqa: E402
from cineconnect.models.film import Film  # noqa: E402
from cineconnect.models.user import User  # noqa: E402

engine = build_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session")
def setup_db():
    """Create tables once for test session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(setup_db):
    """Test client with overridden DB."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def db_session(setup_db):
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def unique() -> str:
    return uuid.uuid4().hex[:8]


@pytest.fixture
def make_user(client):
    """Register and log in a fresh user. Returns id, email, display_name, token, headers."""

    def _make(prefix: str = "user") -> dict:
        uid = unique()
        email = f"{prefix}_{uid}@test.com"
        display_name = f"{prefix}_{uid}"
        r = client.post(
            "/auth/register",
            json={"email": email, "password": "secret123", "display_name": display_name},
        )
        assert r.status_code == 200, r.text
        token = client.post("/auth/login", json={"email": email, "password": "secret123"}).json()["access_token"]
        return {
            "id": r.json()["id"],
            "email": email,
            "display_name": display_name,
            "token": token,
            "headers": {"Authorization": f"Bearer {token}"},
        }

    return _make


@pytest.fixture
def make_admin(make_user, db_session):
    """A user promoted to the site-wide admin role."""

    def _make(prefix: str = "admin") -> dict:
        user = make_user(prefix)
        db_session.get(User, user["id"]).role = "admin"
        db_session.commit()
        return user

    return _make


@pytest.fixture
def make_film(db_session):
    """A stored film that no other test reviews."""

    def _make(title: str | None = None) -> int:
        film = Film(title=title or f"Film {unique()}", genres=["Drama"], cast=[])
        db_session.add(film)
        db_session.commit()
        return film.id

    return _make
