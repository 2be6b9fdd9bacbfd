"""Pydantic schemas for offers."""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import Field

from app.db.enums import OfferStatus
from app.schemas.base import CamelModel
from app.schemas.finance import FinancialRead
from app.schemas.project import ProjectRead


class OfferCreate(CamelModel):
    """Request to bid on an open project."""
    project_id: str
    price: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    delivery_time: int = Field(..., gt=0, description="Delivery time in days")
    description: str | None = Field(None, max_length=5000)


class OfferDecision(CamelModel):
    """Manager decision on a pending offer."""
    status: Literal["ACCEPTED", "REJECTED"]


class OfferRead(CamelModel):
    id: str
    project_id: str
    freelancer_id: str
    price: Decimal
    delivery_time: int
    description: str | None
    status: OfferStatus
    created_at: datetime
    project_title: str | None = None
    freelancer_name: str | None = None
    freelancer_email: str | None = None


class OfferDecisionResult(CamelModel):
    """Outcome of a status change; project/financial are set on acceptance."""
    offer: OfferRead
    project: ProjectRead | None = None
    financial: FinancialRead | None = None
