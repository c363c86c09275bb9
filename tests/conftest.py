"""Pytest configuration and fixtures."""

import itertools
import os

# Set test environment variables BEFORE importing app modules
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-only-32chars")
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("TOKEN_CLEANUP_INTERVAL_MINUTES", "0")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.database import Base
from app.core.security import get_password_hash
from app.api.deps import get_db
from app.models import User
from app.services.auth_service import AuthService
from app.services.session_store import SessionStore
from app.services.user_service import UserService
from main import app

# Create in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

_phone_numbers = itertools.count(81200000000)
_password_hashes = {}


def _hash(password: str) -> str:
    # bcrypt is slow on purpose; reuse hashes across tests
    if password not in _password_hashes:
        _password_hashes[password] = get_password_hash(password)
    return _password_hashes[password]


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override."""
    app.dependency_overrides[get_db] = lambda: db_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_config():
    return settings.auth_config()


@pytest.fixture
def auth_service(db_session, auth_config):
    return AuthService(
        users=UserService(db_session),
        store=SessionStore(db_session),
        config=auth_config,
    )


@pytest.fixture
def create_user(db_session):
    """Factory inserting a user row directly."""

    def _create(
        username: str,
        password: str = "correct-horse-battery",
        role: str = "cashier",
        is_active: bool = True,
        full_name: str | None = None,
    ) -> User:
        user = User(
            full_name=full_name or username.title(),
            username=username,
            email=f"{username}@viplaundry.com",
            password_hash=_hash(password),
            role=role,
            phone_number=str(next(_phone_numbers)),
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create


@pytest.fixture
def alice(create_user):
    return create_user("alice", password="alice-password", role="cashier", full_name="Alice Tan")


@pytest.fixture
def owner(create_user):
    return create_user("owner", password="owner-password", role="owner", full_name="Shop Owner")


@pytest.fixture
def login(client):
    """Log in through the API and return the response ``data`` payload."""

    def _login(username: str, password: str) -> dict:
        response = client.post(
            "/api/v1/auth/login",
            json={"username": username, "password": password},
        )
        assert response.status_code == 200, response.text
        return response.json()["data"]

    return _login


@pytest.fixture
def bearer():
    def _bearer(access_token: str) -> dict:
        return {"Authorization": f"Bearer {access_token}"}

    return _bearer
