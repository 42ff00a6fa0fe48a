"""Shared fixtures: an app on an in-memory database with a fixed secret."""

from datetime import timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from blog_server.core.config import Settings
from blog_server.main import create_app


TEST_SECRET = "test-secret-key-for-testing-only"


def make_settings(tmp_path: Path, **overrides) -> Settings:
    values = dict(
        access_token_secret=TEST_SECRET,
        token_ttl=timedelta(hours=20),
        bcrypt_rounds=4,
        database_url="sqlite://",
        upload_dir=str(tmp_path / "uploads"),
    )
    values.update(overrides)
    return Settings(**values)


def register_and_login(client: TestClient, email="a@b.com", password="pw", name="A") -> str:
    res = client.post("/register", json={"email": email, "password": password, "name": name})
    assert res.status_code == 201, res.text
    res = client.post("/login", json={"email": email, "password": password})
    assert res.status_code == 200, res.text
    return res.json()["token"]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def app(tmp_path):
    return create_app(make_settings(tmp_path))


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def token(client):
    return register_and_login(client)
