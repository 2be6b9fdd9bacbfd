"""Privileged invitation functions called by the signup flow.

complete-invitation answers with plain-text error bodies; the signup page
shows them verbatim.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.orm import Session

from app.core.deps import get_current_session, get_db, require_csrf_header
from app.core.rate_limit import INVITE_LIMIT, limiter
from app.db.enums import UserRole
from app.schemas.auth import UserSession
from app.schemas.invite import (
    CompleteInvitationRequest,
    CompleteInvitationResponse,
    SendInvitationRequest,
    SendInvitationResponse,
)
from app.services import invite_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions", tags=["functions"])


@router.post("/complete-invitation", response_model=CompleteInvitationResponse)
@limiter.limit(INVITE_LIMIT)
def complete_invitation(
    request: Request,
    body: CompleteInvitationRequest,
    db: Session = Depends(get_db),
):
    """
    Consume an invitation and create the profile for a new identity.

    Role and email come from the invitation row, never from the request.
    """
    try:
        profile = invite_service.complete_invitation(
            db,
            token=body.token,
            user_id=body.userId,
            name=body.name,
        )
        db.commit()
    except invite_service.InvalidInvitationRequest as e:
        logger.info("complete-invitation rejected: %s", e)
        return PlainTextResponse(str(e), status_code=400)
    except invite_service.InvalidInvitationToken as e:
        logger.info("complete-invitation rejected: %s", e)
        return PlainTextResponse(str(e), status_code=400)
    except invite_service.InvitationProfileError as e:
        db.rollback()
        return PlainTextResponse(str(e), status_code=500)
    except Exception:
        db.rollback()
        logger.exception("Unexpected error completing invitation")
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    return CompleteInvitationResponse(
        success=True,
        message="Invitation completed successfully",
        role=UserRole(profile.role),
    )


@router.post(
    "/send-invitation",
    response_model=SendInvitationResponse,
    dependencies=[Depends(require_csrf_header)],
)
async def send_invitation(
    body: SendInvitationRequest,
    request: Request,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """Create a targeted invitation and email its signup link."""
    try:
        invitation, signup_url = await invite_service.send_invitation(
            db,
            session,
            email=body.email,
            role=body.role,
            origin=request.headers.get("origin"),
        )
    except invite_service.InvitationPermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except invite_service.InvalidInvitationRequest as e:
        raise HTTPException(status_code=400, detail=str(e))
    except invite_service.InvitationDeliveryError as e:
        raise HTTPException(status_code=502, detail=str(e))

    db.commit()
    return SendInvitationResponse(
        success=True,
        message="Invitation sent successfully",
        invitationId=invitation.id,
        invitationUrl=signup_url,
        token=invitation.token,
    )
