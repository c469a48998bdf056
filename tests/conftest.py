"""Shared pytest fixtures for the User Auth API tests.

Provides:
- A fresh in-memory SQLite storage per test (service-level tests)
- AuthFlow / TokenStore / UserAdmin wired the same way the app wires them
- A Flask app + test client built with TestingConfig
- Helpers for registering a user and building auth headers
"""

from datetime import timedelta

import pytest

from api import create_app
from models import DBStorage
from services.auth_flow import AuthFlow
from services.token_store import TokenStore
from services.user_admin import UserAdmin
from utils.security import TokenSigner

TEST_SECRET = "test-secret-key-for-tests"
PASSWORD = "pw123456"


# ── Service fixtures ──────────────────────────────────────────────────

@pytest.fixture
def storage():
    """Fresh in-memory database for each test."""
    db = DBStorage("sqlite:///:memory:")
    db.reload()
    yield db
    db.close()
    db.drop_all()


@pytest.fixture
def signer():
    return TokenSigner(secret=TEST_SECRET, access_ttl=timedelta(minutes=15))


@pytest.fixture
def token_store(storage):
    return TokenStore(storage, refresh_ttl=timedelta(days=14))


@pytest.fixture
def auth_flow(storage, signer, token_store):
    return AuthFlow(storage, signer, token_store)


@pytest.fixture
def user_admin(storage, token_store):
    return UserAdmin(storage, token_store)


# ── App fixtures ──────────────────────────────────────────────────────

@pytest.fixture
def app():
    app = create_app("testing")
    yield app
    app.extensions["storage"].close()
    app.extensions["storage"].drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register_user(client):
    """Factory: register through the API and return the response data."""

    def _register(email="a@x.com", password=PASSWORD, **profile):
        resp = client.post("/api/v1/auth/register", json={"email": email, "password": password, **profile})
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]

    return _register


@pytest.fixture
def auth_headers(register_user):
    data = register_user(email="admin@x.com")
    return bearer(data["access_token"])
