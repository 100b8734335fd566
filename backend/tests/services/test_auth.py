"""Bearer JWT authentication — header parsing, token verification, user lookup.

Invariants:
    - Missing/malformed header, bad signature, expired token → 401
    - Id claim read from sub, user_id or id
    - Unknown or inactive users → 401
    - Optional auth degrades to anonymous instead of failing
"""

import uuid

import jwt
import pytest

from draws.config import get_settings
from draws.core.errors import AuthenticationError
from draws.infrastructure.auth import (
    authenticate, create_access_token, extract_bearer_token, user_id_from_claims,
)
from draws.models.user import User


def _sign(claims: dict, secret: str | None = None) -> str:
    settings = get_settings()
    return jwt.encode(claims, secret or settings.jwt_secret, algorithm=settings.jwt_algorithm)


# ─── Header parsing ──────────────────────────────────────────────

def test_extract_bearer_token():
    assert extract_bearer_token("Bearer abc.def") == "abc.def"


def test_extract_bearer_token_rejects_bad_headers():
    for header in (None, "", "abc.def", "Basic abc", "Bearer", "Bearer a b"):
        with pytest.raises(AuthenticationError) as exc:
            extract_bearer_token(header)
        assert exc.value.http_status == 401


# ─── Claims ──────────────────────────────────────────────────────

def test_user_id_claim_precedence():
    first, second = uuid.uuid4(), uuid.uuid4()
    assert user_id_from_claims({"sub": str(first), "id": str(second)}) == first
    assert user_id_from_claims({"user_id": str(second)}) == second
    assert user_id_from_claims({"id": str(first)}) == first


def test_user_id_missing_or_malformed():
    with pytest.raises(AuthenticationError, match="not found"):
        user_id_from_claims({"email": "a@b.test"})
    with pytest.raises(AuthenticationError, match="valid UUID"):
        user_id_from_claims({"sub": "not-a-uuid"})


# ─── authenticate() ──────────────────────────────────────────────

async def test_authenticate_resolves_user(test_db, customer):
    user = await authenticate(f"Bearer {create_access_token(customer.id)}", test_db)
    assert user.id == customer.id


async def test_authenticate_accepts_user_id_claim(test_db, customer):
    token = _sign({"user_id": str(customer.id)})
    user = await authenticate(f"Bearer {token}", test_db)
    assert user.id == customer.id


async def test_authenticate_expired_token(test_db, customer):
    token = create_access_token(customer.id, expires_minutes=-1)
    with pytest.raises(AuthenticationError) as exc:
        await authenticate(f"Bearer {token}", test_db)
    assert exc.value.code == "TOKEN_EXPIRED"


async def test_authenticate_wrong_signature(test_db, customer):
    token = _sign({"sub": str(customer.id)}, secret="someone-else")
    with pytest.raises(AuthenticationError) as exc:
        await authenticate(f"Bearer {token}", test_db)
    assert exc.value.code == "INVALID_TOKEN"


async def test_authenticate_unknown_user(test_db):
    token = create_access_token(uuid.uuid4())
    with pytest.raises(AuthenticationError, match="User not found"):
        await authenticate(f"Bearer {token}", test_db)


async def test_authenticate_inactive_user(test_db):
    user = User(email="gone@example.test", name="Gone", role="user", is_active=False)
    test_db.add(user)
    await test_db.commit()

    with pytest.raises(AuthenticationError, match="not active"):
        await authenticate(f"Bearer {create_access_token(user.id)}", test_db)


# ─── Through the API ─────────────────────────────────────────────

async def test_protected_route_returns_envelope(client):
    res = await client.get("/api/v1/draws", headers={"Authorization": "Bearer nope"})
    assert res.status_code == 401
    body = res.json()
    assert body["success"] is False
    assert body["code"] == "INVALID_TOKEN"


async def test_optional_auth_ignores_bad_token(client, make_draw):
    draw = await make_draw()
    res = await client.get(
        f"/api/v1/draws/{draw.id}", headers={"Authorization": "Bearer nope"},
    )
    assert res.status_code == 200
    assert res.json()["data"]["user_has_participated"] is False


async def test_public_read_without_configured_secret(client, make_draw, monkeypatch):
    draw = await make_draw()
    monkeypatch.setattr(get_settings(), "jwt_secret", None)

    res = await client.get(
        f"/api/v1/draws/{draw.id}", headers={"Authorization": "Bearer anything"},
    )

    assert res.status_code == 200
    assert res.json()["data"]["user_has_participated"] is False


async def test_protected_route_without_configured_secret(client, monkeypatch):
    monkeypatch.setattr(get_settings(), "jwt_secret", None)
    res = await client.get("/api/v1/draws", headers={"Authorization": "Bearer anything"})
    assert res.status_code == 500
    assert res.json()["code"] == "AUTH_NOT_CONFIGURED"
