"""Registration, login and account endpoints."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

from blog_server.core.security import TokenCodec

from conftest import TEST_SECRET, bearer, register_and_login


def test_health_routes(client):
    assert client.get("/").text == "Hello World!"
    assert client.get("/test").text == "Test URL!"


def test_register_login_account_flow(client):
    res = client.post("/register", json={"email": "a@b.com", "password": "pw", "name": "A"})
    assert res.status_code == 201
    assert res.text == "User registered"

    res = client.post("/login", json={"email": "a@b.com", "password": "pw"})
    assert res.status_code == 200
    token = res.json()["token"]

    res = client.get("/account", headers=bearer(token))
    assert res.status_code == 200
    assert res.json() == {"email": "a@b.com", "name": "A", "picture": None}


def test_password_is_stored_hashed(client, app):
    register_and_login(client, password="s3cret")
    with app.state.engine.connect() as conn:
        stored = conn.exec_driver_sql("SELECT password FROM users").scalar_one()
    assert stored != "s3cret"
    assert stored.startswith("$bcrypt-sha256$")


def test_duplicate_registration_is_server_error(client):
    register_and_login(client)
    res = client.post("/register", json={"email": "a@b.com", "password": "x", "name": "B"})
    assert res.status_code == 500
    assert res.json()["detail"] == "Error registering user"


def test_login_unknown_email(client):
    res = client.post("/login", json={"email": "nobody@b.com", "password": "pw"})
    assert res.status_code == 404


def test_login_wrong_password(client, token):
    res = client.post("/login", json={"email": "a@b.com", "password": "wrong"})
    assert res.status_code == 401


def test_account_without_header(client):
    res = client.get("/account")
    assert res.status_code == 401
    assert res.headers["www-authenticate"] == "Bearer"


def test_account_with_corrupted_token(client, token):
    res = client.get("/account", headers=bearer(token[:-6] + "xxxxxx"))
    assert res.status_code == 403


def test_account_with_expired_token(client, token):
    past = datetime.now(timezone.utc) - timedelta(hours=20, minutes=1)
    old = TokenCodec(TEST_SECRET, clock=lambda: past).issue({"id": 1, "email": "a@b.com"})
    res = client.get("/account", headers=bearer(old))
    assert res.status_code == 403


def test_account_for_deleted_user(client, app):
    ghost = app.state.token_codec.issue({"id": 999, "email": "ghost@b.com"})
    res = client.get("/account", headers=bearer(ghost))
    assert res.status_code == 404


def test_update_account_fields(client, token):
    res = client.put(
        "/update-account",
        data={"name": "Alice", "email": "alice@b.com"},
        headers=bearer(token),
    )
    assert res.status_code == 200
    assert res.json() == {"message": "User info updated successfully"}

    profile = client.get("/account", headers=bearer(token)).json()
    assert profile == {"email": "alice@b.com", "name": "Alice", "picture": None}


def test_update_account_with_picture(client, app, token):
    res = client.put(
        "/update-account",
        data={"name": "A", "email": "a@b.com"},
        files={"picture": ("me.png", b"\x89PNG fake image", "image/png")},
        headers=bearer(token),
    )
    assert res.status_code == 200

    picture = client.get("/account", headers=bearer(token)).json()["picture"]
    assert picture.startswith("uploads/")
    assert picture.endswith(".png")

    stored = Path(app.state.settings.upload_dir) / Path(picture).name
    assert stored.read_bytes() == b"\x89PNG fake image"

    served = client.get(f"/{picture}")
    assert served.status_code == 200
    assert served.content == b"\x89PNG fake image"


def test_update_account_for_deleted_user(client, app):
    ghost = app.state.token_codec.issue({"id": 999, "email": "ghost@b.com"})
    res = client.put(
        "/update-account",
        data={"name": "G", "email": "ghost@b.com"},
        headers=bearer(ghost),
    )
    assert res.status_code == 400


def test_update_account_requires_token(client):
    res = client.put("/update-account", data={"name": "A", "email": "a@b.com"})
    assert res.status_code == 401


def test_failed_update_leaves_no_picture_behind(client, app):
    upload_dir = Path(app.state.settings.upload_dir)
    ghost = app.state.token_codec.issue({"id": 999, "email": "ghost@b.com"})
    res = client.put(
        "/update-account",
        data={"name": "G", "email": "ghost@b.com"},
        files={"picture": ("me.png", b"img", "image/png")},
        headers=bearer(ghost),
    )
    assert res.status_code == 400
    assert list(upload_dir.iterdir()) == []


def test_rejected_update_leaves_no_picture_behind(client, app, token):
    register_and_login(client, email="taken@b.com", password="pw2", name="T")
    upload_dir = Path(app.state.settings.upload_dir)
    res = client.put(
        "/update-account",
        data={"name": "A", "email": "taken@b.com"},
        files={"picture": ("me.png", b"img", "image/png")},
        headers=bearer(token),
    )
    assert res.status_code == 500
    assert list(upload_dir.iterdir()) == []
    assert client.get("/account", headers=bearer(token)).json()["picture"] is None
