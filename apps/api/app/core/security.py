"""Security utilities for identity tokens and invitation tokens."""

import uuid
from datetime import datetime, timedelta, timezone

import jwt

from app.core.config import settings


# =============================================================================
# Identity Token (JWT issued by the auth provider)
# =============================================================================

def create_identity_token(
    identity_id: str,
    email: str,
    name: str | None = None,
    role: str | None = None,
) -> str:
    """
    Create a signed identity JWT in the auth provider's format.

    Used by tests and local tooling; production tokens come from the
    auth provider, signed with the shared JWT_SECRET.
    """
    user_metadata: dict[str, str] = {}
    if name:
        user_metadata["name"] = name
    if role:
        user_metadata["role"] = role

    payload = {
        "sub": str(identity_id),
        "email": email,
        "user_metadata": user_metadata,
        "aud": settings.JWT_AUDIENCE,
        "iat": datetime.now(timezone.utc),
        "exp": datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRES_HOURS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")


def decode_identity_token(token: str) -> dict:
    """
    Decode and verify an identity JWT.

    Tries current secret first, then previous (for rotation support).

    Raises:
        jwt.InvalidTokenError: If token invalid with all secrets
    """
    last_error = None
    for secret in settings.jwt_secrets:
        try:
            return jwt.decode(
                token,
                secret,
                algorithms=["HS256"],
                audience=settings.JWT_AUDIENCE,
            )
        except jwt.InvalidTokenError as e:
            last_error = e
            continue
    raise last_error  # type: ignore


# =============================================================================
# Invitation Tokens
# =============================================================================

def generate_invitation_token() -> str:
    """Generate an unguessable single-use signup token (random UUID4)."""
    return str(uuid.uuid4())
