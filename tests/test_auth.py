"""Tests for registration, login, logout and bearer token checks."""
import pytest
from httpx import AsyncClient

from conftest import TEST_PASSWORD
from syariahos.db.models import ActivityLog, AuthToken, Category, User

REGISTER_PAYLOAD = {
    "name": "Siti Aminah",
    "email": "Siti@Example.com",
    "password": "rahasia123",
    "passwordConfirmation": "rahasia123",
}


@pytest.mark.asyncio
async def test_register_creates_user_token_and_categories(client: AsyncClient, db):
    response = await client.post("/auth/register", json=REGISTER_PAYLOAD)
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Registration successful"
    assert body["token"]
    assert body["data"]["email"] == "siti@example.com"
    assert body["data"]["role"] == "user"
    assert body["data"]["theme"] == "light"
    assert "password" not in body["data"]
    assert "passwordHash" not in body["data"]

    user = db.query(User).filter(User.email == "siti@example.com").one()
    assert db.query(Category).filter(Category.user_id == user.id).count() == 6
    assert db.query(AuthToken).filter(AuthToken.user_id == user.id).count() == 1
    assert db.query(ActivityLog).filter(ActivityLog.action == "user.registered").count() == 1

    me = await client.get("/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.json()["data"]["id"] == user.id


@pytest.mark.asyncio
async def test_register_duplicate_email_is_rejected(client: AsyncClient, db, test_auth):
    payload = dict(REGISTER_PAYLOAD, email=test_auth.user.email.upper())
    response = await client.post("/auth/register", json=payload)
    assert response.status_code == 422
    body = response.json()
    assert body["message"] == "The email has already been taken."
    assert body["errors"] == {"email": ["The email has already been taken."]}
    assert db.query(User).count() == 1


@pytest.mark.asyncio
async def test_register_password_confirmation_mismatch(client: AsyncClient, db):
    payload = dict(REGISTER_PAYLOAD, passwordConfirmation="different1")
    response = await client.post("/auth/register", json=payload)
    assert response.status_code == 422
    assert "passwordConfirmation" in response.json()["errors"]
    assert db.query(User).count() == 0


@pytest.mark.asyncio
async def test_register_short_password(client: AsyncClient):
    payload = dict(REGISTER_PAYLOAD, password="short", passwordConfirmation="short")
    response = await client.post("/auth/register", json=payload)
    assert response.status_code == 422
    assert "password" in response.json()["errors"]


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, db, test_auth):
    response = await client.post(
        "/auth/login",
        json={"email": test_auth.user.email, "password": TEST_PASSWORD},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["token"]
    assert body["token"] != test_auth.token
    assert body["data"]["id"] == test_auth.user.id
    assert db.query(ActivityLog).filter(ActivityLog.action == "user.login").count() == 1


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, test_auth):
    response = await client.post(
        "/auth/login",
        json={"email": test_auth.user.email, "password": "wrong-password"},
    )
    assert response.status_code == 401
    assert response.json() == {"message": "Invalid credentials"}


@pytest.mark.asyncio
async def test_login_unknown_email(client: AsyncClient):
    response = await client.post(
        "/auth/login", json={"email": "nobody@test.com", "password": TEST_PASSWORD}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_revokes_token(authed_client: AsyncClient, db, test_auth):
    response = await authed_client.post("/auth/logout")
    assert response.status_code == 200
    assert response.json() == {"message": "Logged out successfully"}
    assert db.query(AuthToken).filter(AuthToken.user_id == test_auth.user.id).count() == 0

    response = await authed_client.get("/auth/me")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_keeps_other_tokens(client: AsyncClient, db, test_auth):
    login = await client.post(
        "/auth/login", json={"email": test_auth.user.email, "password": TEST_PASSWORD}
    )
    second_token = login.json()["token"]

    await client.post("/auth/logout", headers=test_auth.headers)

    response = await client.get("/auth/me", headers={"Authorization": f"Bearer {second_token}"})
    assert response.status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "header",
    ["", "Bearer", "Bearer not-a-jwt", "Basic abc"],
)
async def test_invalid_authorization_headers(client: AsyncClient, header):
    headers = {"Authorization": header} if header else {}
    response = await client.get("/auth/me", headers=headers)
    assert response.status_code == 401
    assert response.json() == {"message": "Unauthenticated"}


@pytest.mark.asyncio
async def test_token_of_deleted_user_is_rejected(client: AsyncClient, db, test_auth):
    db.delete(test_auth.user)
    db.commit()
    response = await client.get("/auth/me", headers=test_auth.headers)
    assert response.status_code == 401
