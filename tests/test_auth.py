import pytest

from app.core.exceptions import AuthenticationError
from app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from conftest import API, register, run


def test_register_returns_token_and_public_profile(client):
    data = register(client, email="  Jane@Example.COM ")

    assert data["token"]
    user = data["user"]
    assert user["email"] == "jane@example.com"
    assert user["fullName"] == "Jane Doe"
    assert user["accountStatus"] == "active"
    assert user["subscription"] == "free"
    assert "passwordHash" not in user and "password_hash" not in user


def test_register_stores_hash_not_password(client, db):
    register(client, password="plain-secret")
    stored = run(db["users"].find_one({"email": "jane@example.com"}))
    assert stored["password_hash"] != "plain-secret"
    assert verify_password("plain-secret", stored["password_hash"])


def test_register_duplicate_email(client):
    register(client)
    response = client.post(
        f"{API}/auth/register",
        json={"fullName": "Jane Again", "email": "JANE@example.com", "password": "secret123"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "User with this email already exists"


@pytest.mark.parametrize("payload", [
    {"fullName": "J", "email": "j@example.com", "password": "secret123"},
    {"fullName": "Jane", "email": "not-an-email", "password": "secret123"},
    {"fullName": "Jane", "email": "j@example.com", "password": "123"},
    {"email": "j@example.com", "password": "secret123"},
])
def test_register_validation(client, payload):
    response = client.post(f"{API}/auth/register", json=payload)
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_login_success_updates_last_login(client, db):
    register(client)
    before = run(db["users"].find_one({"email": "jane@example.com"}))["last_login"]

    response = client.post(f"{API}/auth/login", json={"email": "jane@example.com", "password": "secret123"})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["token"]

    after = run(db["users"].find_one({"email": "jane@example.com"}))["last_login"]
    assert after >= before


def test_wrong_password_and_unknown_email_look_the_same(client):
    register(client)

    wrong_password = client.post(f"{API}/auth/login", json={"email": "jane@example.com", "password": "nope-nope"})
    unknown_email = client.post(f"{API}/auth/login", json={"email": "ghost@example.com", "password": "secret123"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()["error"] == "Invalid credentials"


def test_login_inactive_account(client, db):
    register(client)
    run(db["users"].update_one({"email": "jane@example.com"}, {"$set": {"account_status": "suspended"}}))

    response = client.post(f"{API}/auth/login", json={"email": "jane@example.com", "password": "secret123"})
    assert response.status_code == 403
    assert response.json()["code"] == "ACCOUNT_INACTIVE"


def test_suspended_account_token_rejected(client, db, auth_headers):
    run(db["users"].update_one({"email": "jane@example.com"}, {"$set": {"account_status": "suspended"}}))
    response = client.get(f"{API}/auth/me", headers=auth_headers)
    assert response.status_code == 401


def test_me(client, auth_headers):
    response = client.get(f"{API}/auth/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["user"]["email"] == "jane@example.com"


@pytest.mark.parametrize("headers", [
    {},
    {"Authorization": "Bearer not-a-real-token"},
    {"Authorization": "Basic dXNlcjpwYXNz"},
])
def test_me_rejects_missing_or_bad_token(client, headers):
    response = client.get(f"{API}/auth/me", headers=headers)
    assert response.status_code == 401
    assert response.json()["success"] is False


def test_logout_is_acknowledged(client):
    response = client.post(f"{API}/auth/logout")
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_token_round_trip_and_expiry():
    token = create_access_token("64b7f0c2a1b2c3d4e5f60718")
    assert decode_access_token(token) == "64b7f0c2a1b2c3d4e5f60718"

    with pytest.raises(AuthenticationError):
        decode_access_token(token, max_age=-1)

    with pytest.raises(AuthenticationError):
        decode_access_token(token[:-2] + "xx")


def test_password_hash_is_salted():
    first, second = hash_password("secret123"), hash_password("secret123")
    assert first != second
    assert verify_password("secret123", first)
    assert not verify_password("secret124", first)
    assert not verify_password("secret123", None)
