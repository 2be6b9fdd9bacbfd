"""Pydantic schemas for categories and projects."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import Field

from app.db.enums import ProjectStatus
from app.schemas.base import CamelModel


class CategoryCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    color: str | None = Field(None, max_length=20)


class CategoryStatusCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    color: str | None = Field(None, max_length=20)
    order: int | None = Field(None, ge=0)


class CategoryStatusRead(CamelModel):
    id: str
    category_id: str
    title: str
    description: str | None
    color: str | None
    order: int


class CategoryRead(CamelModel):
    id: str
    title: str
    description: str | None
    color: str | None
    status: str
    manager_id: str
    statuses: list[CategoryStatusRead] = []


class ProjectCreate(CamelModel):
    """Request to post a project."""
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    budget: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    deadline: date | None = None
    category_id: str | None = None
    status_id: str | None = None


class ProjectStatusChange(CamelModel):
    status: ProjectStatus


class ProjectRead(CamelModel):
    id: str
    title: str
    description: str
    budget: Decimal | None
    deadline: date | None
    status: ProjectStatus
    manager_id: str
    category_id: str | None
    status_id: str | None
    created_at: datetime
    updated_at: datetime
