"""SQLAlchemy ORM models for the payment ledger."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.enums import DEFAULT_PAYMENT_STATUS
from app.db.types import new_id, utc_now


class Financial(Base):
    """
    Payment ledger header for a project.

    Created exactly once, when an offer on the project is accepted.
    Constraint: UNIQUE(projectId) backs the single-acceptance rule.
    amount_paid and payment_status are derived from FinancialUpdate rows.
    """

    __tablename__ = "Financial"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    project_id: Mapped[str] = mapped_column(
        "projectId",
        String(36),
        ForeignKey("Project.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    accepted_price: Mapped[Decimal] = mapped_column("acceptedPrice", nullable=False)
    estimated_budget: Mapped[Decimal | None] = mapped_column("estimatedBudget", nullable=True)
    amount_paid: Mapped[Decimal] = mapped_column("amountPaid", default=Decimal("0"), nullable=False)
    payment_status: Mapped[str] = mapped_column(
        "paymentStatus", String(20), default=DEFAULT_PAYMENT_STATUS.value, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column("createdAt", default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        "updatedAt", default=utc_now, onupdate=utc_now, nullable=False
    )

    updates: Mapped[list["FinancialUpdate"]] = relationship(
        back_populates="financial",
        cascade="all, delete-orphan",
        order_by="FinancialUpdate.created_at",
    )

    @property
    def remaining(self) -> Decimal:
        """Outstanding balance; never negative."""
        balance = (self.accepted_price or Decimal("0")) - (self.amount_paid or Decimal("0"))
        return max(balance, Decimal("0"))


class FinancialUpdate(Base):
    """Append-only ledger entry. amount is NULL for note-only entries."""

    __tablename__ = "FinancialUpdate"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    financial_id: Mapped[str] = mapped_column(
        "financialId", String(36), ForeignKey("Financial.id", ondelete="CASCADE"), nullable=False
    )
    amount: Mapped[Decimal | None] = mapped_column(nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    updated_by_id: Mapped[str] = mapped_column(
        "updatedById", String(64), ForeignKey("User.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column("createdAt", default=utc_now, nullable=False)

    financial: Mapped["Financial"] = relationship(back_populates="updates")
