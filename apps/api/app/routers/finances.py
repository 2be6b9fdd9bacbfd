"""Payment ledger endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.deps import get_current_session, get_db, require_csrf_header
from app.schemas.auth import UserSession
from app.schemas.finance import (
    FinancialDetail,
    FinancialRead,
    FinancialUpdateCreate,
    FinancialUpdateRead,
)
from app.services import finance_service

router = APIRouter(prefix="/finances", tags=["finances"])


@router.get("", response_model=list[FinancialRead])
def list_financials(
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    return finance_service.list_financials(db, session)


@router.get("/{financial_id}", response_model=FinancialDetail)
def get_financial(
    financial_id: str,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """Ledger header with its entries, oldest first."""
    try:
        return finance_service.get_financial(db, session, financial_id)
    except finance_service.FinancialNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post(
    "/{financial_id}/updates",
    response_model=FinancialUpdateRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def add_financial_update(
    financial_id: str,
    body: FinancialUpdateCreate,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """Record a payment (positive amount) or a note (no amount)."""
    try:
        _, entry = finance_service.add_update(
            db,
            session,
            financial_id,
            description=body.description,
            amount=body.amount,
        )
    except finance_service.FinancialNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except finance_service.FinancialPermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except finance_service.InvalidLedgerEntryError as e:
        raise HTTPException(status_code=400, detail=str(e))

    db.commit()
    db.refresh(entry)
    return entry
