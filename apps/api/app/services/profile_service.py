"""Profile provisioning: lookup, first-load self-heal, and profile edits."""

import logging

from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.enums import DEFAULT_SELF_HEAL_ROLE, ProvisioningSource, UserRole
from app.db.models import User
from app.schemas.auth import IdentityClaims, UserSession

logger = logging.getLogger(__name__)


class ProfileServiceError(Exception):
    """Base exception for profile service errors."""

    pass


class ProfileNotFoundError(ProfileServiceError):
    """No profile row exists for the identity."""

    pass


class SelfHealDisabledError(ProfileServiceError):
    """Identity has no profile and first-load provisioning is turned off."""

    pass


def get_profile(db: Session, user_id: str) -> User | None:
    """Get a profile by identity id."""
    return db.get(User, user_id)


def default_name_for(email: str) -> str | None:
    """Display name fallback: the local part of the email, if any."""
    local_part = (email or "").split("@")[0].strip()
    return local_part or None


def build_profile(
    *,
    user_id: str,
    email: str,
    role: UserRole,
    name: str | None,
    provisioned_via: ProvisioningSource,
) -> User:
    """Construct (but do not persist) a profile row."""
    return User(
        id=user_id,
        email=email or "",
        name=name,
        role=role.value,
        is_superadmin=False,
        provisioned_via=provisioned_via.value,
    )


def ensure_profile(db: Session, identity: IdentityClaims) -> tuple[User, bool]:
    """
    Return the identity's profile, creating it on first load if missing.

    Self-heal always provisions FREELANCER: the role claimed in client-side
    metadata is ignored so manager accounts can only come from invitations.
    The lookup-then-insert is not locked; a concurrent duplicate insert fails
    on the primary key and surfaces to the caller as IntegrityError.

    Returns:
        (profile, created)
    """
    profile = get_profile(db, identity.sub)
    if profile:
        return profile, False

    if not settings.SELF_HEAL_PROFILES:
        raise SelfHealDisabledError("Signup requires an invitation")

    claimed_role = identity.metadata_role
    if claimed_role and claimed_role != DEFAULT_SELF_HEAL_ROLE.value:
        logger.warning(
            "Ignoring claimed role %s during self-heal for user %s",
            claimed_role,
            identity.sub,
        )

    profile = build_profile(
        user_id=identity.sub,
        email=identity.email,
        role=DEFAULT_SELF_HEAL_ROLE,
        name=identity.metadata_name,
        provisioned_via=ProvisioningSource.SELF_HEAL,
    )
    db.add(profile)
    db.flush()

    logger.info("Self-healed missing profile for user %s", identity.sub)
    return profile, True


def update_profile(
    db: Session,
    session: UserSession,
    *,
    name: str | None = None,
    avatar: str | None = None,
) -> User:
    """Update display fields on the caller's own profile."""
    profile = get_profile(db, session.user_id)
    if not profile:
        raise ProfileNotFoundError("Profile not found")

    if name is not None:
        profile.name = name.strip() or None
    if avatar is not None:
        profile.avatar = avatar.strip() or None

    db.flush()
    return profile


def list_profiles(db: Session, role: UserRole | None = None) -> list[User]:
    """Directory listing, newest first."""
    query = db.query(User)
    if role:
        query = query.filter(User.role == role.value)
    return query.order_by(User.created_at.desc()).all()
