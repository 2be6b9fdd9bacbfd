"""Payment ledger: per-project financial header and its update entries."""

import logging
from decimal import Decimal

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from app.db.enums import OfferStatus, PaymentStatus, UserRole
from app.db.models import Financial, FinancialUpdate, Offer, Project
from app.db.types import utc_now
from app.schemas.auth import UserSession

logger = logging.getLogger(__name__)

# Numeric(12, 2) bounds
MAX_AMOUNT = Decimal("9999999999.99")
CENT = Decimal("0.01")


class FinanceServiceError(Exception):
    """Base exception for finance service errors."""

    pass


class FinancialNotFoundError(FinanceServiceError):
    """Ledger not found (or not visible to the caller)."""

    pass


class FinancialPermissionError(FinanceServiceError):
    """Only the owning manager may record payments."""

    pass


class InvalidLedgerEntryError(FinanceServiceError):
    pass


def compute_payment_status(accepted_price: Decimal, amount_paid: Decimal) -> PaymentStatus:
    if amount_paid <= 0:
        return PaymentStatus.PENDING
    if amount_paid >= accepted_price:
        return PaymentStatus.PAID
    return PaymentStatus.PARTIAL


def _check_amount(amount: Decimal) -> None:
    if amount <= 0:
        raise InvalidLedgerEntryError("Amount must be positive")
    if amount > MAX_AMOUNT:
        raise InvalidLedgerEntryError("Amount is too large")
    if amount != amount.quantize(CENT):
        raise InvalidLedgerEntryError("Amount cannot have more than 2 decimal places")


def _visibility_filter(db: Session, session: UserSession):
    """Row filter matching what the caller may read; None means unrestricted."""
    if session.is_superadmin:
        return None
    owned = db.query(Project.id).filter(Project.manager_id == session.user_id)
    won = db.query(Offer.project_id).filter(
        Offer.freelancer_id == session.user_id,
        Offer.status == OfferStatus.ACCEPTED.value,
    )
    if session.role == UserRole.MANAGER:
        return Financial.project_id.in_(owned)
    return or_(Financial.project_id.in_(owned), Financial.project_id.in_(won))


def list_financials(db: Session, session: UserSession) -> list[Financial]:
    """Ledgers for the caller's projects (managers) or won projects (freelancers)."""
    query = db.query(Financial)
    condition = _visibility_filter(db, session)
    if condition is not None:
        query = query.filter(condition)
    return query.order_by(Financial.created_at.desc()).all()


def get_financial(db: Session, session: UserSession, financial_id: str) -> Financial:
    query = (
        db.query(Financial)
        .options(selectinload(Financial.updates))
        .filter(Financial.id == financial_id)
    )
    condition = _visibility_filter(db, session)
    if condition is not None:
        query = query.filter(condition)
    financial = query.first()
    if not financial:
        raise FinancialNotFoundError("Financial record not found")
    return financial


def get_financial_for_project(db: Session, project_id: str) -> Financial | None:
    return db.query(Financial).filter(Financial.project_id == project_id).first()


def add_update(
    db: Session,
    session: UserSession,
    financial_id: str,
    *,
    description: str,
    amount: Decimal | None = None,
) -> tuple[Financial, FinancialUpdate]:
    """
    Append a ledger entry and re-derive amount_paid / payment_status.

    A positive amount is a payment; omitting it records a note only.
    Overpayment is accepted and flagged in the log; the status is PAID.

    Raises:
        FinancialNotFoundError: unknown ledger, or not visible to the caller
        FinancialPermissionError: caller does not own the project
        InvalidLedgerEntryError: blank description, or an amount that is not
            positive or does not fit the ledger (two decimals, 10 whole digits)
    """
    financial = (
        db.query(Financial)
        .filter(Financial.id == financial_id)
        .with_for_update()
        .first()
    )
    if not financial:
        raise FinancialNotFoundError("Financial record not found")

    project = db.get(Project, financial.project_id)
    if project.manager_id != session.user_id and not session.is_superadmin:
        condition = _visibility_filter(db, session)
        visible = db.query(Financial.id).filter(Financial.id == financial.id, condition).first()
        if visible:
            raise FinancialPermissionError("Only the project's manager can record payments")
        raise FinancialNotFoundError("Financial record not found")

    description = (description or "").strip()
    if not description:
        raise InvalidLedgerEntryError("Description is required")
    if amount is not None:
        _check_amount(amount)
        if (financial.amount_paid or Decimal("0")) + amount > MAX_AMOUNT:
            raise InvalidLedgerEntryError("Amount paid would exceed the maximum ledger value")

    entry = FinancialUpdate(
        financial_id=financial.id,
        amount=amount,
        description=description,
        updated_by_id=session.user_id,
    )
    db.add(entry)

    if amount is not None:
        previous_status = financial.payment_status
        financial.amount_paid = (financial.amount_paid or Decimal("0")) + amount
        financial.payment_status = compute_payment_status(
            financial.accepted_price, financial.amount_paid
        ).value
        financial.updated_at = utc_now()
        if financial.amount_paid > financial.accepted_price:
            logger.warning(
                "Financial %s overpaid: paid %s against accepted price %s",
                financial.id,
                financial.amount_paid,
                financial.accepted_price,
            )
        if previous_status != financial.payment_status:
            logger.info(
                "Financial %s payment status %s -> %s",
                financial.id,
                previous_status,
                financial.payment_status,
            )

    db.flush()
    return financial, entry
