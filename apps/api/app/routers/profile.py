"""Profile endpoints: current profile (with first-load self-heal) and directory."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.deps import (
    get_current_session,
    get_db,
    get_identity,
    require_csrf_header,
    require_roles,
)
from app.db.enums import ROLES_CAN_VIEW_DIRECTORY, UserRole
from app.schemas.auth import IdentityClaims, UserSession
from app.schemas.user import ProfileRead, ProfileUpdate
from app.services import profile_service

router = APIRouter(tags=["profile"])


@router.get("/profile/me", response_model=ProfileRead)
def get_my_profile(
    identity: IdentityClaims = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """
    Return the caller's profile.

    An identity without a profile (e.g. signup interrupted before the
    invitation was completed) gets a FREELANCER profile on first load.
    """
    try:
        profile, created = profile_service.ensure_profile(db, identity)
    except profile_service.SelfHealDisabledError as e:
        raise HTTPException(status_code=403, detail=str(e))
    if created:
        db.commit()
        db.refresh(profile)
    return profile


@router.patch(
    "/profile/me",
    response_model=ProfileRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_my_profile(
    body: ProfileUpdate,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    try:
        profile = profile_service.update_profile(
            db, session, name=body.name, avatar=body.avatar
        )
    except profile_service.ProfileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    db.commit()
    db.refresh(profile)
    return profile


@router.get("/users", response_model=list[ProfileRead])
def list_users(
    role: UserRole | None = None,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_roles(list(ROLES_CAN_VIEW_DIRECTORY))),
):
    """User directory, e.g. the freelancer list (managers and superadmins)."""
    return profile_service.list_profiles(db, role)
