import pytest

from tests._helpers.fakes import register_and_login


pytestmark = pytest.mark.asyncio


async def test_root_health(client):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


async def test_register_hashes_password(client):
    resp = await client.post(
        "/v1/auth/register", json={"email": "new@example.com", "password": "pw-12345"}
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["email"] == "new@example.com"
    assert "password" not in body and "hashed_password" not in body


async def test_duplicate_email_is_rejected(client):
    await register_and_login(client, email="dup@example.com")
    resp = await client.post(
        "/v1/auth/register", json={"email": "dup@example.com", "password": "other-pw"}
    )
    assert resp.status_code == 400


async def test_login_with_wrong_password_fails(client):
    await register_and_login(client, email="who@example.com", password="right-pw")
    resp = await client.post(
        "/v1/auth/login", data={"username": "who@example.com", "password": "wrong-pw"}
    )
    assert resp.status_code == 400


async def test_jwks_publishes_signing_key(client):
    resp = await client.get("/.well-known/jwks.json")
    assert resp.status_code == 200
    keys = resp.json()["keys"]
    assert keys[0]["kty"] == "RSA"
    assert keys[0]["kid"] == "v1"
