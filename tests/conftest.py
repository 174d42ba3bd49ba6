"""Pytest configuration and fixtures."""

import os
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from src.api.dependencies import get_otp_store
from src.database import Base, build_engine, get_db
from src.main import app
from src.services.email import EmailService
from src.services.otp import InMemoryOTPStore


class AuthHeaders(dict):
    """Dict subclass that also stores the user's id and email."""

    def __init__(self, *args, user_id: str | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


class RecordingEmailService(EmailService):
    """Email service that records messages instead of talking to SMTP."""

    def __init__(self):
        super().__init__()
        self.sent: list[dict] = []
        self.reset_codes: dict[str, str] = {}

    def send(self, to_email: str, subject: str, html_body: str) -> bool:
        self.sent.append({"to": to_email, "subject": subject, "html": html_body})
        return True

    def send_password_reset_code(self, to_email: str, code: str, name: str | None = None) -> bool:
        self.reset_codes[to_email] = code
        return super().send_password_reset_code(to_email, code, name)


# Use test database - PostgreSQL when DATABASE_URL is set, SQLite locally
if os.getenv("DATABASE_URL", "").startswith("postgresql"):
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").rsplit("/", 1)[0] + "/notes_test"
else:
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = build_engine(SQLALCHEMY_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    from src import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def otp_store():
    return InMemoryOTPStore()


@pytest.fixture
def email_service():
    """Run queued reset emails inline against a recording service."""
    service = RecordingEmailService()
    with (
        patch(
            "src.tasks.email.send_password_reset_code.delay",
            side_effect=service.send_password_reset_code,
        ),
        patch(
            "src.tasks.email.send_password_reset_success.delay",
            side_effect=service.send_password_reset_success,
        ),
    ):
        yield service


@pytest.fixture(scope="function")
def client(db, otp_store, email_service):
    """Create a test client with database, code store and email overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_otp_store] = lambda: otp_store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def register_and_login(client, email: str, password: str = "testpass123", name: str = "Test User"):
    """Sign up a user, log in, and return auth headers."""
    response = client.post(
        "/api/auth/signup",
        json={"email": email, "password": password, "name": name},
    )
    assert response.status_code == 201
    user_id = response.json()["id"]

    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    token = response.json()["token"]

    return AuthHeaders({"Authorization": f"Bearer {token}"}, user_id=user_id, email=email)


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return register_and_login(client, "test@example.com")


@pytest.fixture
def other_auth_headers(client):
    """A second, unrelated user."""
    return register_and_login(client, "other@example.com", name="Other User")
