# tests/conftest.py
"""
Pytest configuration and fixtures.
Settings are read at import time, so the environment is filled in first.
Every test gets its own in-memory SQLite database.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("NOTIFICATIONS_ENABLED", "true")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.database import Base, get_db
from app.main import app as fastapi_app
from app.models.user import RoleName, User, UserStatus
from app.utils.security import create_access_token


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


def _make_user(db, role: RoleName, n: int) -> User:
    u = User(
        firstName="Staff",
        lastName=f"Member{n}",
        email=f"staff{n}@registry.rw",
        phoneNumber=f"078{n:07d}",
        nationalId=f"1200{n:012d}",
        role=role,
        status=UserStatus.ACTIVE,
        enabled=True,
        isActive=True,
    )
    db.add(u)
    db.commit()
    return u


@pytest.fixture
def admin_headers(db):
    admin = _make_user(db, RoleName.ADMIN, 1)
    return {"Authorization": f"Bearer {create_access_token(admin.id, admin.role.value)}"}


@pytest.fixture
def user_headers(db):
    clerk = _make_user(db, RoleName.OWNER, 2)
    return {"Authorization": f"Bearer {create_access_token(clerk.id, clerk.role.value)}"}
