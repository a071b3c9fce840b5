"""Global pytest fixtures for the Chirpy API."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

import pytest
from flask import Flask

from chirpy.api import create_app
from chirpy.models import storage
from chirpy.models.user import User
from chirpy.utils.refresh_tokens import RefreshTokenStore
from chirpy.utils.security import hash_password
from tests.helpers import JWT_SECRET, PASSWORD, POLKA_KEY


@pytest.fixture()
def app() -> Generator[Flask, None, None]:
    """A Flask app on a fresh in-memory SQLite database."""

    application = create_app(
        "testing",
        test_config={"JWT_SECRET": JWT_SECRET, "POLKA_KEY": POLKA_KEY},
    )
    with application.app_context():
        yield application
    storage.close()


@pytest.fixture()
def client(app: Flask) -> Any:
    """Return a Flask test client."""

    return app.test_client()


@pytest.fixture()
def session_service(app: Flask):
    return app.extensions["chirpy.session"]


@pytest.fixture()
def refresh_store(app: Flask) -> RefreshTokenStore:
    return RefreshTokenStore(storage)


@pytest.fixture()
def make_user(app: Flask):
    """Insert a user directly through storage."""

    def _make(email: str = "walt@breakingbad.com", password: str = PASSWORD) -> User:
        user = User(email=email, password_hash=hash_password(password))
        storage.new(user)
        storage.save()
        return user

    return _make


@pytest.fixture()
def user(make_user) -> User:
    return make_user()


@pytest.fixture()
def login(client):
    """Log in over HTTP and return the JSON body."""

    def _login(email: str = "walt@breakingbad.com", password: str = PASSWORD) -> dict:
        resp = client.post("/api/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return resp.get_json()

    return _login
