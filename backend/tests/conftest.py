# tests/conftest.py

import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Put the backend root on PYTHONPATH so the app package imports
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

# Keep test runs away from the development database
os.environ.setdefault("DB_URL", "sqlite:///./tasktracker_test.db")
os.environ.setdefault("TESTING", "1")

from app import models  # noqa: E402
from app.core.rate_limit import limiter  # noqa: E402
from app.core.security import hash_password  # noqa: E402
from app.db import Base, SessionLocal, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.repositories import SqlAlchemyRepository  # noqa: E402
from app.schemas.enums import UserRole  # noqa: E402
from app.services import Actor, build_services  # noqa: E402


@pytest.fixture(autouse=True)
def clean_db():
    """
    Recreate the schema before every test so tests cannot see each other's rows.
    The rate limiter is reset as well so limits don't accumulate across tests.
    """
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    limiter.reset()
    yield


@pytest.fixture()
def client() -> TestClient:
    """HTTP client for the FastAPI application."""
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def services(db_session):
    """Core services over a real SQLAlchemy session."""
    return build_services(SqlAlchemyRepository(db_session))


@pytest.fixture()
def make_user(db_session):
    """Factory: insert a user directly and return it as an ``Actor``."""

    def _make_user(name: str, role: UserRole = UserRole.MEMBER, is_active: bool = True) -> Actor:
        user = models.User(
            email=f"{name}@example.com",
            username=name,
            full_name=name.title(),
            hashed_password=hash_password("secret"),
            role=role.value,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        return Actor.from_user(user)

    return _make_user
