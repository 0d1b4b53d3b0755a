"""
Tests for organizer registration, login and bearer token handling.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_register_organizer(client: AsyncClient):
    """Successful registration returns public fields and a token."""
    response = await client.post("/api/organizers/register", json={
        "name": "Sam Okafor",
        "email": "sam@example.com",
        "password": "march-on-2026",
        "bio": "Housing rights",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["token"]
    assert data["token_type"] == "bearer"
    assert data["organizer"]["email"] == "sam@example.com"
    assert data["organizer"]["bio"] == "Housing rights"
    assert data["organizerId"] == data["organizer"]["id"]
    assert "password_hash" not in data["organizer"]
    assert "password" not in data["organizer"]


@pytest.mark.asyncio
async def test_register_token_authorizes_dashboard(client: AsyncClient):
    response = await client.post("/api/organizers/register", json={
        "name": "Sam Okafor",
        "email": "sam@example.com",
        "password": "march-on-2026",
    })
    data = response.json()

    dashboard = await client.get(
        f"/api/organizers/{data['organizerId']}/analytics",
        headers={"Authorization": f"Bearer {data['token']}"},
    )
    assert dashboard.status_code == 200
    assert dashboard.json() == {"followers": 0, "total_likes": 0, "social_clicks": 0}


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, organizer):
    """Second registration with the same email returns 409."""
    response = await client.post("/api/organizers/register", json={
        "name": "Someone Else",
        "email": "alex@example.com",
        "password": "another-password",
    })
    assert response.status_code == 409
    assert response.json()["detail"] == "Email already registered"


@pytest.mark.asyncio
async def test_register_same_email_twice_via_api(client: AsyncClient):
    payload = {"name": "Jo", "email": "jo@example.com", "password": "pw-123456"}
    first = await client.post("/api/organizers/register", json=payload)
    second = await client.post("/api/organizers/register", json=payload)
    assert first.status_code == 201
    assert second.status_code == 409


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["name", "email", "password"])
async def test_register_missing_field(client: AsyncClient, missing):
    """Any missing required field is a 400."""
    payload = {"name": "Jo", "email": "jo@example.com", "password": "pw-123456"}
    del payload[missing]
    response = await client.post("/api/organizers/register", json=payload)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_register_empty_name(client: AsyncClient):
    response = await client.post("/api/organizers/register", json={
        "name": "",
        "email": "jo@example.com",
        "password": "pw-123456",
    })
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_register_invalid_email(client: AsyncClient):
    response = await client.post("/api/organizers/register", json={
        "name": "Jo",
        "email": "not-an-email",
        "password": "pw-123456",
    })
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_mixed_case_email_is_stored_as_submitted(client: AsyncClient):
    credentials = {"email": "Pat@Example.COM", "password": "pw-123456"}
    register = await client.post("/api/organizers/register", json={"name": "Pat", **credentials})
    assert register.status_code == 201
    assert register.json()["organizer"]["email"] == "Pat@Example.COM"

    login = await client.post("/api/organizers/login", json=credentials)
    assert login.status_code == 200
    assert login.json()["organizerId"] == register.json()["organizerId"]


@pytest.mark.asyncio
async def test_register_password_over_72_bytes(client: AsyncClient):
    """The limit counts UTF-8 bytes: 40 accented characters is 80 bytes."""
    response = await client.post("/api/organizers/register", json={
        "name": "Jo",
        "email": "jo@example.com",
        "password": "é" * 40,
    })
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_register_password_of_exactly_72_bytes(client: AsyncClient):
    credentials = {"email": "jo@example.com", "password": "é" * 36}
    register = await client.post("/api/organizers/register", json={"name": "Jo", **credentials})
    assert register.status_code == 201

    login = await client.post("/api/organizers/login", json=credentials)
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_login_with_overlong_password_is_rejected(client: AsyncClient, organizer):
    response = await client.post("/api/organizers/login", json={
        "email": "alex@example.com",
        "password": "é" * 40,
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, organizer):
    response = await client.post("/api/organizers/login", json={
        "email": "alex@example.com",
        "password": "correct-horse-battery",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["organizerId"] == organizer.id
    assert data["organizer"]["name"] == "Alex Rivera"
    assert data["token"]


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, organizer):
    response = await client.post("/api/organizers/login", json={
        "email": "alex@example.com",
        "password": "wrong-password",
    })
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_login_has_no_lockout(client: AsyncClient, organizer):
    """Repeated failures neither lock the account nor start succeeding."""
    for _ in range(5):
        response = await client.post("/api/organizers/login", json={
            "email": "alex@example.com",
            "password": "wrong-password",
        })
        assert response.status_code == 401

    response = await client.post("/api/organizers/login", json={
        "email": "alex@example.com",
        "password": "correct-horse-battery",
    })
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_login_unknown_email(client: AsyncClient):
    response = await client.post("/api/organizers/login", json={
        "email": "nobody@example.com",
        "password": "whatever",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_token_authorizes_protest_creation(client: AsyncClient, organizer):
    login = await client.post("/api/organizers/login", json={
        "email": "alex@example.com",
        "password": "correct-horse-battery",
    })
    token = login.json()["token"]

    response = await client.post(
        "/api/protests",
        json={"name": "Tenant Rally", "date": "2030-05-01", "time": "18:30:00"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 201
    assert response.json()["organizer_id"] == organizer.id


@pytest.mark.asyncio
async def test_missing_token_returns_401(client: AsyncClient, organizer):
    response = await client.get(f"/api/organizers/{organizer.id}/protests")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_non_bearer_scheme_returns_401(client: AsyncClient, organizer):
    response = await client.get(
        f"/api/organizers/{organizer.id}/protests",
        headers={"Authorization": "Token abc.def.ghi"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_garbage_token_returns_403(client: AsyncClient, organizer):
    response = await client.get(
        f"/api/organizers/{organizer.id}/protests",
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == 403
    assert response.json()["detail"] == "Invalid or expired token"


@pytest.mark.asyncio
async def test_expired_token_returns_403(client: AsyncClient, organizer):
    expired = jwt.encode(
        {"sub": str(organizer.id), "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        "test-secret",
        algorithm="HS256",
    )
    response = await client.get(
        f"/api/organizers/{organizer.id}/protests",
        headers={"Authorization": f"Bearer {expired}"},
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_token_signed_with_other_secret_returns_403(client: AsyncClient, organizer):
    forged = jwt.encode(
        {"sub": str(organizer.id), "exp": datetime.now(timezone.utc) + timedelta(days=1)},
        "someone-elses-secret",
        algorithm="HS256",
    )
    response = await client.post(
        "/api/protests",
        json={"name": "Forged", "date": "2030-05-01", "time": "18:30:00"},
        headers={"Authorization": f"Bearer {forged}"},
    )
    assert response.status_code == 403
