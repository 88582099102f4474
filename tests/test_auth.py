"""Registration, login and bearer-token authentication."""

from datetime import datetime, timedelta

import pytest
from jose import jwt

from conftest import make_user, auth_header
from src.auth import JWT_SECRET_KEY, ALGORITHM, decode_token
from src.errors import ConflictError, UnauthorizedError
from src.services import auth as auth_service


REGISTRATION = {
    "name": "Carol",
    "surname": "Smith",
    "username": "carol",
    "email": "carol@example.com",
    "password": "password123",
}


def test_register_returns_user_without_hash_and_token(client):
    response = client.post("/auth/register", data=REGISTRATION)

    assert response.status_code == 201
    body = response.json()
    assert body["user"]["username"] == "carol"
    assert body["user"]["email"] == "carol@example.com"
    assert "password_hash" not in body["user"]
    assert "password" not in body["user"]

    claims = decode_token(body["token"])
    assert claims["sub"] == body["user"]["id"]
    assert claims["email"] == "carol@example.com"
    assert claims["exp"] > claims["iat"]


def test_register_with_profile_picture(client):
    files = {"profilePicture": ("me.png", b"\x89PNG fake image", "image/png")}

    response = client.post("/auth/register", data=REGISTRATION, files=files)

    assert response.status_code == 201
    picture = response.json()["user"]["profile_picture"]
    assert picture.startswith("http://testserver/uploads/profile-pictures/profile-")
    assert picture.endswith(".png")

    served = client.get(picture.replace("http://testserver", ""))
    assert served.status_code == 200
    assert served.content == b"\x89PNG fake image"


def test_register_rejects_non_image_profile_picture(client):
    files = {"profilePicture": ("notes.txt", b"hello", "text/plain")}

    response = client.post("/auth/register", data=REGISTRATION, files=files)

    assert response.status_code == 400


@pytest.mark.parametrize("field,value", [
    ("email", "not-an-email"),
    ("password", "12345"),
    ("username", "   "),
])
def test_register_validates_input(client, field, value):
    response = client.post("/auth/register", data={**REGISTRATION, field: value})

    assert response.status_code == 400


def test_duplicate_email_conflicts_naming_email(db, alice):
    with pytest.raises(ConflictError) as exc_info:
        make_user(db, "someone_else", email="alice@example.com")

    assert "email" in exc_info.value.detail


def test_duplicate_username_conflicts_naming_username(db, alice):
    with pytest.raises(ConflictError) as exc_info:
        make_user(db, "alice", email="other@example.com")

    assert "username" in exc_info.value.detail


def test_email_collision_takes_precedence(db, alice):
    with pytest.raises(ConflictError) as exc_info:
        make_user(db, "alice", email="alice@example.com")

    assert exc_info.value.detail == "User with this email already exists"


def test_duplicate_registration_over_http_is_409(client):
    assert client.post("/auth/register", data=REGISTRATION).status_code == 201

    response = client.post("/auth/register", data={**REGISTRATION, "username": "carol2"})

    assert response.status_code == 409
    assert response.json()["detail"] == "User with this email already exists"


def test_login_returns_public_user_and_token(client, alice):
    response = client.post("/auth/login", json={"email": "alice@example.com", "password": "secret123"})

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["username"] == "alice"
    assert "password_hash" not in body["user"]
    assert decode_token(body["token"])["sub"] == body["user"]["id"]


def test_wrong_password_and_unknown_email_are_indistinguishable(db, client, alice):
    with pytest.raises(UnauthorizedError) as wrong_password:
        auth_service.login(db, "alice@example.com", "not-the-password")
    with pytest.raises(UnauthorizedError) as unknown_email:
        auth_service.login(db, "nobody@example.com", "secret123")

    assert wrong_password.value.detail == unknown_email.value.detail

    first = client.post("/auth/login", json={"email": "alice@example.com", "password": "wrongpass"})
    second = client.post("/auth/login", json={"email": "nobody@example.com", "password": "secret123"})
    assert first.status_code == second.status_code == 401
    assert first.json() == second.json()


def test_validate_user_returns_none_for_unknown_subject(db, alice):
    user, _ = alice

    assert auth_service.validate_user(db, {"sub": user.id}).id == user.id
    assert auth_service.validate_user(db, {"sub": "missing"}) is None
    assert auth_service.validate_user(db, {}) is None


def test_guarded_route_requires_token(client):
    response = client.get("/users/profile")

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_guarded_route_rejects_invalid_token(client):
    response = client.get("/users/profile", headers=auth_header("not.a.token"))

    assert response.status_code == 401


def test_guarded_route_rejects_expired_token(client, alice):
    user, _ = alice
    expired = jwt.encode(
        {"sub": user.id, "email": user.email, "exp": datetime.utcnow() - timedelta(minutes=1)},
        JWT_SECRET_KEY,
        algorithm=ALGORITHM,
    )

    response = client.get("/users/profile", headers=auth_header(expired))

    assert response.status_code == 401


def test_token_of_deleted_user_is_rejected(client, alice):
    _, token = alice
    assert client.delete("/users/profile", headers=auth_header(token)).status_code == 200

    response = client.get("/users/profile", headers=auth_header(token))

    assert response.status_code == 401


def test_update_profile_picture(client, alice):
    _, token = alice
    files = {"profilePicture": ("new.jpg", b"jpeg bytes", "image/jpeg")}

    response = client.put("/auth/profile/picture", headers=auth_header(token), files=files)

    assert response.status_code == 200
    assert response.json()["profile_picture"].endswith(".jpg")


def test_update_profile_picture_requires_file(client, alice):
    _, token = alice

    response = client.put("/auth/profile/picture", headers=auth_header(token))

    assert response.status_code == 400
    assert response.json()["detail"] == "Profile picture is required"
