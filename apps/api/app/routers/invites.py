"""Invitation management endpoints (signup links)."""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.core.deps import get_current_session, get_db, require_csrf_header
from app.core.rate_limit import INVITE_LIMIT, limiter
from app.db.enums import UserRole
from app.db.models import Invitation
from app.schemas.auth import UserSession
from app.schemas.invite import InvitationCreate, InvitationRead, InvitationValidation
from app.services import invite_service


router = APIRouter(prefix="/invitations", tags=["invitations"])


# =============================================================================
# Helpers
# =============================================================================


def _invitation_to_read(invitation: Invitation, origin: str | None) -> InvitationRead:
    return InvitationRead(
        id=invitation.id,
        token=invitation.token,
        email=invitation.email,
        role=UserRole(invitation.role),
        invited_by=invitation.invited_by,
        status=invite_service.get_invitation_status(invitation),
        signup_url=invite_service.build_signup_url(origin, invitation.token),
        created_at=invitation.created_at,
        expires_at=invitation.expires_at,
        used_at=invitation.used_at,
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.get("", response_model=list[InvitationRead])
def list_invitations(
    request: Request,
    role: UserRole | None = None,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """List invitations issued by the caller (superadmins see all)."""
    origin = request.headers.get("origin")
    invitations = invite_service.list_invitations(db, session, role)
    return [_invitation_to_read(inv, origin) for inv in invitations]


@router.post(
    "",
    response_model=InvitationRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_invitation(
    body: InvitationCreate,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """Generate a signup link. Managers may only invite freelancers."""
    try:
        invitation = invite_service.generate_signup_link(db, session, body.role, body.email)
    except invite_service.InvitationPermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except invite_service.InvalidInvitationRequest as e:
        raise HTTPException(status_code=400, detail=str(e))

    db.commit()
    db.refresh(invitation)
    return _invitation_to_read(invitation, request.headers.get("origin"))


@router.delete(
    "/{invitation_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def delete_invitation(
    invitation_id: str,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """Revoke an invitation (hard delete)."""
    try:
        invite_service.delete_invitation(db, session, invitation_id)
    except invite_service.InvitationNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    db.commit()


@router.get("/validate/{token}", response_model=InvitationValidation)
@limiter.limit(INVITE_LIMIT)
def validate_invitation(
    request: Request,
    token: str,
    db: Session = Depends(get_db),
):
    """
    Public token check before the signup form is shown.

    Read-only: validating the same token twice returns the same answer.
    """
    try:
        invitation = invite_service.validate_token(db, token)
    except invite_service.InvalidInvitationToken as e:
        raise HTTPException(status_code=404, detail=str(e))

    return InvitationValidation(
        role=UserRole(invitation.role),
        email=invitation.email,
        expires_at=invitation.expires_at,
    )
