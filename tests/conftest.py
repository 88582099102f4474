"""Shared fixtures. Configuration is pointed at a temporary directory before the app is imported."""

import os
import tempfile

_TMP = tempfile.mkdtemp(prefix="blog_platform_api_")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ["PATH_DATABASE"] = os.path.join(_TMP, "db")
os.environ["NAME_DB"] = "test.db"
os.environ["PATH_UPLOADS"] = os.path.join(_TMP, "uploads")
os.environ["PATH_LOG_FILE"] = os.path.join(_TMP, "test.log")
os.environ["URL_BASE_API"] = "http://testserver"

import pytest
from fastapi.testclient import TestClient

from src.database import SessionLocal, engine
from src.main import app
from src.models import Base
from src.services import auth as auth_service
from src.storage import media_bucket


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def bucket():
    media_bucket.create()
    return media_bucket


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def make_user(db, username, email=None, password="secret123"):
    """Register a user directly through the service layer."""
    result = auth_service.register(
        db,
        name=username.capitalize(),
        surname="Tester",
        username=username,
        email=email or f"{username}@example.com",
        password=password,
    )
    return result["user"], result["token"]


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(db):
    return make_user(db, "alice")


@pytest.fixture
def bob(db):
    return make_user(db, "bob")
