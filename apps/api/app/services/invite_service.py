"""Invitation lifecycle: issue, validate, consume, and revoke signup links."""

import logging
import re
from datetime import datetime, timedelta
from typing import Literal

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import generate_invitation_token
from app.db.enums import (
    INVITABLE_ROLES_BY_MANAGER,
    ROLES_CAN_INVITE,
    ProvisioningSource,
    UserRole,
)
from app.db.models import Invitation, User
from app.db.types import utc_now
from app.schemas.auth import UserSession
from app.services import invite_email_service, profile_service

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class InvitationServiceError(Exception):
    """Base exception for invitation service errors."""

    pass


class InvalidInvitationRequest(InvitationServiceError):
    """Request failed field validation."""

    pass


class InvalidInvitationToken(InvitationServiceError):
    """Token is unknown, already used, or expired."""

    pass


class InvitationNotFound(InvitationServiceError):
    pass


class InvitationPermissionError(InvitationServiceError):
    """Caller may not issue or delete this invitation."""

    pass


class InvitationProfileError(InvitationServiceError):
    """Identity exists but its profile could not be created."""

    pass


class InvitationDeliveryError(InvitationServiceError):
    """Invitation email could not be dispatched."""

    pass


# =============================================================================
# Helpers
# =============================================================================


def is_expired(invitation: Invitation, now: datetime | None = None) -> bool:
    """An invitation is only usable while now < expires_at."""
    now = now or utc_now()
    return now >= invitation.expires_at


def get_invitation_status(
    invitation: Invitation, now: datetime | None = None
) -> Literal["pending", "used", "expired"]:
    """Derive invitation status from fields."""
    if invitation.used_at:
        return "used"
    if is_expired(invitation, now):
        return "expired"
    return "pending"


def build_signup_url(origin: str | None, token: str) -> str:
    """Signup link: <origin>/auth?token=<token>."""
    base = (origin or settings.FRONTEND_URL).rstrip("/")
    return f"{base}/auth?token={token}"


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def _check_can_issue(session: UserSession, role: UserRole) -> None:
    """Superadmins may issue any role; managers may only invite freelancers."""
    if session.is_superadmin:
        return
    if session.role not in ROLES_CAN_INVITE:
        raise InvitationPermissionError("Only managers can issue invitations")
    if role not in INVITABLE_ROLES_BY_MANAGER:
        raise InvitationPermissionError(
            f"Only superadmins can issue {role.value} invitations"
        )


# =============================================================================
# Issue / list / delete
# =============================================================================


def generate_signup_link(
    db: Session,
    session: UserSession,
    role: UserRole,
    email: str = "",
) -> Invitation:
    """
    Create a single-use signup grant valid for INVITE_EXPIRY_DAYS.

    A blank email produces an open link for the role. The link itself is
    distributed out of band (see build_signup_url).
    """
    _check_can_issue(session, role)

    email = normalize_email(email)
    if email and not EMAIL_PATTERN.match(email):
        raise InvalidInvitationRequest("Invalid email format")

    now = utc_now()
    invitation = Invitation(
        token=generate_invitation_token(),
        email=email,
        role=role.value,
        invited_by=session.user_id,
        expires_at=now + timedelta(days=settings.INVITE_EXPIRY_DAYS),
        used_at=None,
    )
    db.add(invitation)
    db.flush()

    logger.info(
        "Invitation %s issued by %s for role %s (%s)",
        invitation.id,
        session.user_id,
        role.value,
        "targeted" if email else "open link",
    )
    return invitation


def list_invitations(
    db: Session,
    session: UserSession,
    role: UserRole | None = None,
) -> list[Invitation]:
    """List invitations issued by the caller (superadmins see all), newest first."""
    query = db.query(Invitation)
    if not session.is_superadmin:
        query = query.filter(Invitation.invited_by == session.user_id)
    if role:
        query = query.filter(Invitation.role == role.value)
    return query.order_by(Invitation.created_at.desc()).limit(200).all()


def delete_invitation(db: Session, session: UserSession, invitation_id: str) -> None:
    """Hard delete. Only the issuer or a superadmin may delete."""
    invitation = db.get(Invitation, invitation_id)
    if not invitation:
        raise InvitationNotFound("Invitation not found")
    if invitation.invited_by != session.user_id and not session.is_superadmin:
        # Same answer as a missing row, like a row-level policy would give
        raise InvitationNotFound("Invitation not found")

    db.delete(invitation)
    db.flush()
    logger.info("Invitation %s deleted by %s", invitation_id, session.user_id)


def get_invitation_by_token(db: Session, token: str) -> Invitation | None:
    if not token:
        return None
    return db.query(Invitation).filter(Invitation.token == token).first()


# =============================================================================
# Validate / complete
# =============================================================================


def validate_token(db: Session, token: str, now: datetime | None = None) -> Invitation:
    """
    Check a token before showing the signup form. Read-only.

    Raises:
        InvalidInvitationToken: unknown, used, or expired
    """
    invitation = get_invitation_by_token(db, token)
    if not invitation:
        raise InvalidInvitationToken("Invalid invitation token")
    if invitation.used_at is not None:
        raise InvalidInvitationToken("Invitation has already been used")
    if is_expired(invitation, now):
        raise InvalidInvitationToken("Invitation has expired")
    return invitation


def complete_invitation(
    db: Session,
    token: str,
    user_id: str,
    name: str | None = None,
) -> User:
    """
    Consume a token and create the profile for a freshly created identity.

    Runs with service privileges: the caller is not yet a profile owner.
    Role and email always come from the invitation; open links leave the
    profile email blank.

    Token consumption and profile insert share one transaction. used_at is
    set with a conditional update so two concurrent completions cannot both
    consume the token, and a failed profile insert rolls the consumption back.

    Raises:
        InvalidInvitationRequest: token or user id missing
        InvalidInvitationToken: unknown, used, or expired at this moment
        InvitationProfileError: profile could not be created
    """
    if not token or not user_id:
        raise InvalidInvitationRequest("Missing token or userId")

    invitation = get_invitation_by_token(db, token)
    if not invitation:
        raise InvalidInvitationToken("Invalid invitation token")

    now = utc_now()
    if invitation.used_at is not None or is_expired(invitation, now):
        raise InvalidInvitationToken("Invitation is no longer valid")

    if profile_service.get_profile(db, user_id):
        logger.warning(
            "Invitation %s not consumed: user %s already has a profile",
            invitation.id,
            user_id,
        )
        raise InvitationProfileError("Failed to create user profile")

    consumed = (
        db.query(Invitation)
        .filter(
            Invitation.id == invitation.id,
            Invitation.used_at.is_(None),
            Invitation.expires_at > now,
        )
        .update({Invitation.used_at: now, Invitation.updated_at: now}, synchronize_session=False)
    )
    if consumed != 1:
        raise InvalidInvitationToken("Invitation is no longer valid")

    profile_email = invitation.email
    role = UserRole(invitation.role)
    profile = profile_service.build_profile(
        user_id=user_id,
        email=profile_email,
        role=role,
        name=(name or "").strip() or profile_service.default_name_for(profile_email),
        provisioned_via=ProvisioningSource.INVITATION,
    )
    db.add(profile)
    try:
        db.flush()
    except IntegrityError:
        logger.exception("Error creating user profile for %s", user_id)
        raise InvitationProfileError("Failed to create user profile")

    db.refresh(invitation)
    logger.info(
        "Invitation completed successfully for user %s with role %s", user_id, role.value
    )
    return profile


# =============================================================================
# Email invitations
# =============================================================================


def has_pending_invitation(db: Session, email: str) -> bool:
    """True when an unused, unexpired invitation exists for the email."""
    return (
        db.query(Invitation.id)
        .filter(
            func.lower(Invitation.email) == normalize_email(email),
            Invitation.used_at.is_(None),
            Invitation.expires_at > utc_now(),
        )
        .first()
        is not None
    )


async def send_invitation(
    db: Session,
    session: UserSession,
    email: str,
    role: UserRole | None,
    origin: str | None = None,
) -> tuple[Invitation, str]:
    """
    Create a targeted invitation and email the signup link.

    The invitation row is deleted again when the email cannot be sent.

    Returns:
        (invitation, signup_url)
    """
    email = normalize_email(email)
    if not email or role is None:
        raise InvalidInvitationRequest("Missing email or role")
    if not EMAIL_PATTERN.match(email):
        raise InvalidInvitationRequest("Invalid email format")

    if db.query(User.id).filter(func.lower(User.email) == email).first():
        raise InvalidInvitationRequest("User with this email already exists")
    if has_pending_invitation(db, email):
        raise InvalidInvitationRequest("Pending invitation already exists for this email")

    invitation = generate_signup_link(db, session, role, email)
    signup_url = build_signup_url(origin, invitation.token)

    result = await invite_email_service.send_invitation_email(
        invitation,
        signup_url,
        inviter_name=session.name,
    )
    if not result.get("success"):
        db.delete(invitation)
        db.flush()
        logger.warning(
            "Invitation email for role %s failed, invitation removed: %s",
            role.value,
            result.get("error"),
        )
        raise InvitationDeliveryError(result.get("error") or "Failed to send invitation email")

    logger.info("Invitation created successfully for role %s", role.value)
    return invitation, signup_url
