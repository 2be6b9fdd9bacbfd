"""Offer endpoints: bidding, review, and the accept/reject decision."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.core.deps import get_current_session, get_db, require_csrf_header, require_roles
from app.db.enums import ROLES_CAN_SUBMIT_OFFERS, OfferStatus
from app.db.models import Offer
from app.schemas.auth import UserSession
from app.schemas.finance import FinancialRead
from app.schemas.offer import OfferCreate, OfferDecision, OfferDecisionResult, OfferRead
from app.schemas.project import ProjectRead
from app.services import export_service, offer_service

router = APIRouter(prefix="/offers", tags=["offers"])


def _offer_to_read(offer: Offer) -> OfferRead:
    read = OfferRead.model_validate(offer)
    if offer.project:
        read.project_title = offer.project.title
    if offer.freelancer:
        read.freelancer_name = offer.freelancer.name
        read.freelancer_email = offer.freelancer.email
    return read


@router.get("", response_model=list[OfferRead])
def list_offers(
    project_id: str | None = None,
    status: OfferStatus | None = None,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """Freelancers see their own offers; managers see offers on their projects."""
    offers = offer_service.list_offers(db, session, project_id=project_id, status=status)
    return [_offer_to_read(offer) for offer in offers]


@router.get("/export")
def export_offers(
    status: OfferStatus | None = None,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """Download the visible offers as CSV."""
    offers = offer_service.list_offers(db, session, status=status)
    filename = export_service.export_filename("offers")
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return Response(
        content=export_service.offers_csv(offers),
        media_type="text/csv",
        headers=headers,
    )


@router.post(
    "",
    response_model=OfferRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_offer(
    body: OfferCreate,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_roles(list(ROLES_CAN_SUBMIT_OFFERS))),
):
    try:
        offer = offer_service.create_offer(db, session, body)
    except offer_service.OfferNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except offer_service.OfferPermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except offer_service.ProjectNotOpenError as e:
        raise HTTPException(status_code=409, detail=str(e))
    db.commit()
    return _offer_to_read(offer_service.get_offer(db, session, offer.id))


@router.get("/{offer_id}", response_model=OfferRead)
def get_offer(
    offer_id: str,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    try:
        return _offer_to_read(offer_service.get_offer(db, session, offer_id))
    except offer_service.OfferNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch(
    "/{offer_id}/status",
    response_model=OfferDecisionResult,
    dependencies=[Depends(require_csrf_header)],
)
def update_offer_status(
    offer_id: str,
    body: OfferDecision,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """
    Accept or reject a pending offer.

    Acceptance moves the project to IN_PROGRESS and opens its payment
    ledger in the same transaction.
    """
    try:
        offer, project, financial = offer_service.update_offer_status(
            db, session, offer_id, OfferStatus(body.status)
        )
    except offer_service.OfferNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except offer_service.OfferPermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except (
        offer_service.OfferAlreadyDecidedError,
        offer_service.ProjectNotOpenError,
        offer_service.ProjectAlreadyAwardedError,
    ) as e:
        db.rollback()
        raise HTTPException(status_code=409, detail=str(e))

    db.commit()
    return OfferDecisionResult(
        offer=_offer_to_read(offer_service.get_offer(db, session, offer.id)),
        project=ProjectRead.model_validate(project) if project else None,
        financial=FinancialRead.model_validate(financial) if financial else None,
    )
