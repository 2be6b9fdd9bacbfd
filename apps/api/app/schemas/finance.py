"""Pydantic schemas for the payment ledger."""

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from app.db.enums import PaymentStatus
from app.schemas.base import CamelModel


class FinancialUpdateCreate(CamelModel):
    """Ledger entry. Omit amount for a note-only entry."""
    amount: Decimal | None = None
    description: str = Field(..., min_length=1, max_length=2000)


class FinancialUpdateRead(CamelModel):
    id: str
    financial_id: str
    amount: Decimal | None
    description: str
    updated_by_id: str
    created_at: datetime


class FinancialRead(CamelModel):
    id: str
    project_id: str
    accepted_price: Decimal
    estimated_budget: Decimal | None
    amount_paid: Decimal
    remaining: Decimal
    payment_status: PaymentStatus
    created_at: datetime
    updated_at: datetime


class FinancialDetail(FinancialRead):
    updates: list[FinancialUpdateRead] = []
