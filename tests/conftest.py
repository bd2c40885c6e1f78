"""Pytest fixtures for Taskboard tests."""

import pytest
from fastapi.testclient import TestClient

from taskboard.config import Settings
from taskboard.database import User
from taskboard.main import create_app
from taskboard.store import Stores


@pytest.fixture
def settings():
    """Settings for an isolated in-memory database."""
    return Settings(
        environment="testing",
        database_url="sqlite://",
        secret_key="test-secret-key-that-is-long-enough-for-hs256-signing",
        password_rounds=4,
    )


@pytest.fixture
def app(settings):
    """Create application for testing."""
    return create_app(settings)


@pytest.fixture
def client(app):
    """Create a test client."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(app):
    """Session bound to the application's database."""
    session = app.state.session_factory()
    yield session
    session.close()


@pytest.fixture
def stores(db, settings):
    return Stores(db, password_rounds=settings.password_rounds)


@pytest.fixture
def register(client):
    """Register a user through the API and return its payload plus auth headers."""

    def _register(username, email=None, password="password123"):
        email = email or f"{username}@example.com"
        response = client.post(
            "/auth/register",
            json={"username": username, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        body = response.json()
        body["headers"] = {"Authorization": f"Bearer {body['token']}"}
        return body

    return _register


@pytest.fixture
def promote(app):
    """Grant the admin role directly in the database (there is no API for it)."""

    def _promote(user_id):
        session = app.state.session_factory()
        try:
            user = session.get(User, user_id)
            user.role = "admin"
            session.commit()
        finally:
            session.close()

    return _promote


@pytest.fixture
def leader(register):
    return register("leaderuser", "leader@example.com")


@pytest.fixture
def member(register):
    return register("memberuser", "member@example.com")


@pytest.fixture
def outsider(register):
    return register("outsider", "outsider@example.com")
