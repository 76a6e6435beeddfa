"""Shared fixtures: an in-memory SQLite store per test plus small factories."""

import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("STORAGE_BACKEND", "local")
os.environ.setdefault("STORAGE_ROOT", tempfile.mkdtemp(prefix="roomly-uploads-"))

from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from roomly.db import Base
from roomly.models.amenity import Amenity
from roomly.models.community import Community
from roomly.models.user import User
from roomly.storage import ObjectStorage
import roomly.main  # noqa: F401  (registers every model on Base.metadata)


NOW = datetime(2030, 1, 1, 9, 0, 0)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def community(db):
    c = Community(name="Torre Norte", address="Av. Central 100", total_points=0)
    db.add(c)
    db.commit()
    db.refresh(c)
    return c


@pytest.fixture
def other_community(db):
    c = Community(name="Torre Sur", address="Av. Central 200", total_points=0)
    db.add(c)
    db.commit()
    db.refresh(c)
    return c


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(community=None, *, role="RESIDENT", status="ACTIVE", points=0, name=None):
        counter["n"] += 1
        n = counter["n"]
        u = User(
            email=f"resident{n}@example.com",
            name=name or f"Resident {n}",
            role=role,
            status=status,
            points=points,
            community_id=community.id if community is not None else None,
        )
        db.add(u)
        db.commit()
        db.refresh(u)
        return u

    return _make


@pytest.fixture
def resident(make_user, community):
    return make_user(community)


@pytest.fixture
def admin(make_user, community):
    return make_user(community, role="ADMIN", name="Admin")


@pytest.fixture
def make_amenity(db):
    def _make(community, *, name="Gym", category=None, points_reward=10, amenity_type="GYM"):
        a = Amenity(
            community_id=community.id,
            name=name,
            amenity_type=amenity_type,
            category=category,
            capacity=10,
            points_reward=points_reward,
        )
        db.add(a)
        db.commit()
        db.refresh(a)
        return a

    return _make


@pytest.fixture
def gym(make_amenity, community):
    return make_amenity(community)


@pytest.fixture
def pool(make_amenity, community):
    return make_amenity(community, name="Pool", category="POOL", points_reward=50, amenity_type="POOL")


class FakeStorage(ObjectStorage):
    def __init__(self):
        self.uploads = {}

    def upload(self, path, data):
        self.uploads[path] = data
        return f"https://cdn.test/{path}"


@pytest.fixture
def storage():
    return FakeStorage()
