"""Offers: submission, visibility, and the accept/reject transition.

Accepting an offer is the one place three tables change together:
the offer becomes ACCEPTED, the project moves OPEN -> IN_PROGRESS, and the
project's Financial ledger header is created. All three happen in the
caller's transaction; routers commit once the service returns.
"""

import logging
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.db.enums import OfferStatus, PaymentStatus, ProjectStatus, UserRole
from app.db.models import Financial, Offer, Project
from app.db.types import utc_now
from app.schemas.auth import UserSession
from app.schemas.offer import OfferCreate
from app.services import finance_service

logger = logging.getLogger(__name__)


class OfferServiceError(Exception):
    """Base exception for offer service errors."""

    pass


class OfferNotFoundError(OfferServiceError):
    """Offer not found (or not visible to the caller)."""

    pass


class ProjectNotOpenError(OfferServiceError):
    """Offers can only be placed on, or accepted for, OPEN projects."""

    pass


class OfferPermissionError(OfferServiceError):
    pass


class OfferAlreadyDecidedError(OfferServiceError):
    """Offer is no longer PENDING."""

    pass


class ProjectAlreadyAwardedError(OfferServiceError):
    """Project already has an accepted offer."""

    pass


def _offer_query(db: Session):
    return db.query(Offer).options(
        joinedload(Offer.project),
        joinedload(Offer.freelancer),
    )


def create_offer(db: Session, session: UserSession, data: OfferCreate) -> Offer:
    """Submit a PENDING offer on an OPEN project."""
    if session.role != UserRole.FREELANCER:
        raise OfferPermissionError("Only freelancers can submit offers")

    project = db.get(Project, data.project_id)
    if not project:
        raise OfferNotFoundError("Project not found")
    if project.status != ProjectStatus.OPEN.value:
        raise ProjectNotOpenError("Project is not accepting offers")

    offer = Offer(
        project_id=project.id,
        freelancer_id=session.user_id,
        price=data.price,
        delivery_time=data.delivery_time,
        description=(data.description or "").strip() or None,
        status=OfferStatus.PENDING.value,
    )
    db.add(offer)
    db.flush()
    logger.info("Offer %s submitted on project %s", offer.id, project.id)
    return offer


def list_offers(
    db: Session,
    session: UserSession,
    project_id: str | None = None,
    status: OfferStatus | None = None,
) -> list[Offer]:
    """
    Offers visible to the caller, newest first.

    - Freelancer: own offers
    - Manager: offers on own projects
    - Superadmin: everything
    """
    query = _offer_query(db)
    if session.is_superadmin:
        pass
    elif session.role == UserRole.MANAGER:
        query = query.join(Offer.project).filter(Project.manager_id == session.user_id)
    else:
        query = query.filter(Offer.freelancer_id == session.user_id)

    if project_id:
        query = query.filter(Offer.project_id == project_id)
    if status:
        query = query.filter(Offer.status == status.value)
    return query.order_by(Offer.created_at.desc()).all()


def get_offer(db: Session, session: UserSession, offer_id: str) -> Offer:
    offer = _offer_query(db).filter(Offer.id == offer_id).first()
    if not offer:
        raise OfferNotFoundError("Offer not found")
    if session.is_superadmin:
        return offer
    if offer.freelancer_id == session.user_id or offer.project.manager_id == session.user_id:
        return offer
    raise OfferNotFoundError("Offer not found")


def update_offer_status(
    db: Session,
    session: UserSession,
    offer_id: str,
    new_status: OfferStatus,
) -> tuple[Offer, Project | None, Financial | None]:
    """
    Accept or reject a pending offer.

    The project row is locked for the duration of the decision so two
    managers (or two tabs) cannot accept competing offers. On acceptance the
    project moves to IN_PROGRESS and its ledger header is created with
    amount_paid=0 and payment_status=PENDING.

    Returns:
        (offer, project, financial); project and financial are None on reject

    Raises:
        OfferNotFoundError: unknown offer, or not visible to the caller
        OfferPermissionError: caller does not own the project
        OfferAlreadyDecidedError: offer is not PENDING
        ProjectNotOpenError: project is not OPEN
        ProjectAlreadyAwardedError: another offer was already accepted
    """
    if new_status == OfferStatus.PENDING:
        raise OfferAlreadyDecidedError("Offers can only be accepted or rejected")

    offer = db.get(Offer, offer_id)
    if not offer:
        raise OfferNotFoundError("Offer not found")

    project = (
        db.query(Project)
        .filter(Project.id == offer.project_id)
        .with_for_update()
        .one()
    )
    if project.manager_id != session.user_id and not session.is_superadmin:
        if offer.freelancer_id == session.user_id:
            raise OfferPermissionError("Only the project's manager can decide on offers")
        raise OfferNotFoundError("Offer not found")

    db.refresh(offer)
    if offer.status != OfferStatus.PENDING.value:
        raise OfferAlreadyDecidedError(f"Offer is already {offer.status}")

    if new_status == OfferStatus.REJECTED:
        offer.status = OfferStatus.REJECTED.value
        db.flush()
        logger.info("Offer %s rejected by %s", offer.id, session.user_id)
        return offer, None, None

    if project.status != ProjectStatus.OPEN.value:
        raise ProjectNotOpenError("Project is not open")

    already_accepted = (
        db.query(Offer.id)
        .filter(
            Offer.project_id == project.id,
            Offer.status == OfferStatus.ACCEPTED.value,
        )
        .first()
    )
    if already_accepted or finance_service.get_financial_for_project(db, project.id):
        raise ProjectAlreadyAwardedError("Project already has an accepted offer")

    now = utc_now()
    offer.status = OfferStatus.ACCEPTED.value
    project.status = ProjectStatus.IN_PROGRESS.value
    project.updated_at = now
    financial = Financial(
        project_id=project.id,
        accepted_price=offer.price,
        estimated_budget=project.budget,
        amount_paid=Decimal("0"),
        payment_status=PaymentStatus.PENDING.value,
    )
    db.add(financial)
    try:
        db.flush()
    except IntegrityError:
        logger.warning("Concurrent acceptance on project %s", project.id)
        raise ProjectAlreadyAwardedError("Project already has an accepted offer")

    logger.info(
        "Offer %s accepted on project %s at %s",
        offer.id,
        project.id,
        offer.price,
    )
    return offer, project, financial
