"""FastAPI dependencies for authentication, authorization, and database access."""

import logging
from typing import Generator

import jwt
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.core.security import decode_identity_token
from app.db.session import SessionLocal
from app.schemas.auth import IdentityClaims, UserSession

logger = logging.getLogger(__name__)

AUTH_HEADER = "Authorization"
CSRF_HEADER = "X-Requested-With"
CSRF_HEADER_VALUE = "XMLHttpRequest"


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_identity(request: Request) -> IdentityClaims:
    """
    Verify the bearer identity token issued by the auth provider.

    Does not require a profile row; used by first-load provisioning.

    Raises:
        HTTPException 401: Missing or invalid token
    """
    header = request.headers.get(AUTH_HEADER, "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = decode_identity_token(token)
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid session")

    if not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid session")
    return IdentityClaims.model_validate(payload)


def get_current_session(
    identity: IdentityClaims = Depends(get_identity),
    db: Session = Depends(get_db),
) -> UserSession:
    """
    Get full session context: identity plus profile role.

    This is the PRIMARY auth dependency for most endpoints.

    Raises:
        HTTPException 401: Not authenticated
        HTTPException 403: No profile or unknown role
    """
    from app.db.enums import UserRole
    from app.db.models import User

    profile = db.get(User, identity.sub)
    if not profile:
        raise HTTPException(status_code=403, detail="Profile not found")

    # Validate role is a known enum value - return 403 not 500
    if not UserRole.has_value(profile.role):
        raise HTTPException(
            status_code=403,
            detail=f"Unknown role '{profile.role}'. Contact administrator.",
        )

    return UserSession(
        user_id=profile.id,
        email=profile.email,
        role=UserRole(profile.role),
        is_superadmin=profile.is_superadmin,
        name=profile.name,
    )


def require_roles(allowed_roles: list):
    """
    Dependency factory for role-based authorization. Superadmins always pass.

    Usage:
        @router.post("/projects", dependencies=[Depends(require_roles([UserRole.MANAGER]))])
    """

    def dependency(session: UserSession = Depends(get_current_session)) -> UserSession:
        if session.role not in allowed_roles and not session.is_superadmin:
            raise HTTPException(
                status_code=403,
                detail=f"Role '{session.role.value}' not authorized for this action",
            )
        return session

    return dependency


def require_csrf_header(request: Request) -> None:
    """
    Verify CSRF header on mutations.

    Apply to state-changing endpoints (POST, PATCH, DELETE).

    Raises:
        HTTPException 403: Missing or invalid CSRF header
    """
    if request.headers.get(CSRF_HEADER) != CSRF_HEADER_VALUE:
        raise HTTPException(
            status_code=403,
            detail=f"Missing CSRF header. Include '{CSRF_HEADER}: {CSRF_HEADER_VALUE}'",
        )
