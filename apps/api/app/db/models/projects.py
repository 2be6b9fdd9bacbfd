"""SQLAlchemy ORM models for categories, projects and offers."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.enums import DEFAULT_OFFER_STATUS, DEFAULT_PROJECT_STATUS
from app.db.types import new_id, utc_now


class ProjectCategory(Base):
    """Manager-owned grouping for projects, with its own status board."""

    __tablename__ = "ProjectCategory"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    color: Mapped[str | None] = mapped_column(String(20), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE", nullable=False)
    manager_id: Mapped[str] = mapped_column(
        "managerId", String(64), ForeignKey("User.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column("createdAt", default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        "updatedAt", default=utc_now, onupdate=utc_now, nullable=False
    )

    statuses: Mapped[list["CategoryStatus"]] = relationship(
        back_populates="category",
        cascade="all, delete-orphan",
        order_by="CategoryStatus.order",
    )


class CategoryStatus(Base):
    """Ordered custom status column inside a category."""

    __tablename__ = "CategoryStatus"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    category_id: Mapped[str] = mapped_column(
        "categoryId",
        String(36),
        ForeignKey("ProjectCategory.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    color: Mapped[str | None] = mapped_column(String(20), nullable=True)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column("createdAt", default=utc_now, nullable=False)

    category: Mapped["ProjectCategory"] = relationship(back_populates="statuses")


class Project(Base):
    """Unit of work posted by a manager."""

    __tablename__ = "Project"
    __table_args__ = (
        Index("ix_project_manager", "managerId"),
        Index("ix_project_status", "status"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    budget: Mapped[Decimal | None] = mapped_column(nullable=True)
    deadline: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=DEFAULT_PROJECT_STATUS.value, nullable=False
    )
    manager_id: Mapped[str] = mapped_column(
        "managerId", String(64), ForeignKey("User.id", ondelete="CASCADE"), nullable=False
    )
    category_id: Mapped[str | None] = mapped_column(
        "categoryId",
        String(36),
        ForeignKey("ProjectCategory.id", ondelete="SET NULL"),
        nullable=True,
    )
    status_id: Mapped[str | None] = mapped_column(
        "statusId",
        String(36),
        ForeignKey("CategoryStatus.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column("createdAt", default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        "updatedAt", default=utc_now, onupdate=utc_now, nullable=False
    )

    offers: Mapped[list["Offer"]] = relationship(
        back_populates="project", cascade="all, delete-orphan"
    )
    financial: Mapped[Optional["Financial"]] = relationship(
        cascade="all, delete-orphan", uselist=False
    )


class Offer(Base):
    """A freelancer's priced bid on a project."""

    __tablename__ = "Offer"
    __table_args__ = (
        Index("ix_offer_project", "projectId"),
        Index("ix_offer_freelancer", "freelancerId"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    project_id: Mapped[str] = mapped_column(
        "projectId", String(36), ForeignKey("Project.id", ondelete="CASCADE"), nullable=False
    )
    freelancer_id: Mapped[str] = mapped_column(
        "freelancerId", String(64), ForeignKey("User.id", ondelete="CASCADE"), nullable=False
    )
    price: Mapped[Decimal] = mapped_column(nullable=False)
    delivery_time: Mapped[int] = mapped_column("deliveryTime", Integer, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=DEFAULT_OFFER_STATUS.value, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column("createdAt", default=utc_now, nullable=False)

    project: Mapped["Project"] = relationship(back_populates="offers")
    freelancer: Mapped["User"] = relationship(foreign_keys=[freelancer_id])
