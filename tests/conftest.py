"""
Pytest configuration for the classroom backend tests.

The database is a single shared in-memory SQLite connection; the schema is
recreated for every test.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.setdefault("JWT_ACCESS_SECRET", "test-access-secret")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from core.database import SessionLocal, engine  # noqa: E402
from models.base import Base  # noqa: E402
from utils.auth_manager import AuthManager  # noqa: E402
from utils.class_manager import ClassManager  # noqa: E402
from utils.grade_book_manager import GradeBookManager  # noqa: E402
from utils.user_manager import UserManager  # noqa: E402


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def users(db) -> UserManager:
    return UserManager(db)


@pytest.fixture
def auth(db) -> AuthManager:
    return AuthManager(db)


@pytest.fixture
def classes(db) -> ClassManager:
    return ClassManager(db, owner_only_moderation=True)


@pytest.fixture
def grade_book(db) -> GradeBookManager:
    return GradeBookManager(db)


@pytest.fixture
def make_user(users):
    def _make(login: str, password: str = "secret-pass"):
        return users.create_user(login, password, name=login.title(), surname="Test")

    return _make


@pytest.fixture
def client(db):
    import app as app_module

    with TestClient(app_module.app) as c:
        yield c
