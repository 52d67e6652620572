"""
Pytest configuration and shared fixtures.

The environment is set before any application module is imported so the
engine binds to in-memory SQLite and bcrypt runs with its cheapest work
factor.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient

from src.linkbio.core.security import get_token_issuer
from src.linkbio.db.base import Base
from src.linkbio.db.session import SessionLocal, engine
from src.linkbio.main import app
from src.linkbio.services.auth_service import AuthService
from src.linkbio.services.email_service import get_email_sender

API = "/api/v1"


class RecordingMailer:
    """Email sender that keeps messages in memory instead of sending them."""

    def __init__(self, succeed: bool = True) -> None:
        self.succeed = succeed
        self.reset_emails: list[tuple[str, str]] = []
        self.verification_emails: list[tuple[str, str]] = []

    def send_reset_password_email(self, email: str, token: str) -> bool:
        self.reset_emails.append((email, token))
        return self.succeed

    def send_verification_email(self, email: str, token: str) -> bool:
        self.verification_emails.append((email, token))
        return self.succeed


@pytest.fixture(autouse=True)
def reset_database():
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
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def tokens():
    return get_token_issuer()


@pytest.fixture
def auth_service(db, tokens, mailer) -> AuthService:
    return AuthService(db, tokens, mailer)


@pytest.fixture
def client(mailer):
    app.dependency_overrides[get_email_sender] = lambda: mailer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Register a user over HTTP and return its token."""

    def _register(username="alice", email="a@x.com", password="pw123") -> str:
        resp = client.post(
            f"{API}/users/register",
            json={"username": username, "email": email, "password": password},
        )
        assert resp.status_code == 201, resp.text
        return resp.json()["token"]

    return _register
