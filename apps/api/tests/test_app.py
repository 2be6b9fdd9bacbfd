"""Tests for app wiring: health, request ids, identity tokens."""

import pytest


@pytest.mark.asyncio
async def test_health(client):
    from app.core.config import settings

    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "env": settings.ENV, "version": settings.VERSION}


@pytest.mark.asyncio
async def test_request_id_generated(client):
    response = await client.get("/health")
    assert len(response.headers["X-Request-ID"]) == 36


@pytest.mark.asyncio
async def test_request_id_echoed(client):
    response = await client.get("/health", headers={"X-Request-ID": "req-abc"})
    assert response.headers["X-Request-ID"] == "req-abc"


def test_identity_token_round_trip():
    from app.core.security import create_identity_token, decode_identity_token

    token = create_identity_token("user-1", "a@example.com", name="Ann", role="FREELANCER")
    payload = decode_identity_token(token)

    assert payload["sub"] == "user-1"
    assert payload["email"] == "a@example.com"
    assert payload["user_metadata"] == {"name": "Ann", "role": "FREELANCER"}


def test_identity_token_previous_secret_accepted(monkeypatch):
    import jwt

    from app.core.config import settings
    from app.core.security import create_identity_token, decode_identity_token

    token = create_identity_token("user-1", "a@example.com")
    monkeypatch.setattr(settings, "JWT_SECRET_PREVIOUS", settings.JWT_SECRET)
    monkeypatch.setattr(settings, "JWT_SECRET", "rotated-secret")

    assert decode_identity_token(token)["sub"] == "user-1"

    monkeypatch.setattr(settings, "JWT_SECRET_PREVIOUS", "")
    with pytest.raises(jwt.InvalidTokenError):
        decode_identity_token(token)


def test_log_context_is_pii_free():
    from app.core.structured_logging import build_log_context

    context = build_log_context(user_id="user-1", request_id="r", method="GET", status_code=200)
    assert context == {"user_id": "user-1", "request_id": "r", "method": "GET", "status_code": 200}


def test_enum_wire_values():
    from app.db.enums import MessagePlatform, OfferStatus, PaymentStatus, ProjectStatus, UserRole

    assert [r.value for r in UserRole] == ["MANAGER", "FREELANCER"]
    assert [s.value for s in ProjectStatus] == ["OPEN", "IN_PROGRESS", "COMPLETED", "CANCELLED"]
    assert [s.value for s in OfferStatus] == ["PENDING", "ACCEPTED", "REJECTED"]
    assert [s.value for s in PaymentStatus] == ["PENDING", "PARTIAL", "PAID"]
    assert [p.value for p in MessagePlatform] == ["IN_APP", "WHATSAPP", "TELEGRAM"]
    assert UserRole.has_value("FREELANCER")
    assert not UserRole.has_value("ADMIN")
