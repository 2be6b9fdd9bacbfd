"""Profile-related Pydantic schemas."""

from datetime import datetime

from pydantic import Field

from app.db.enums import UserRole
from app.schemas.base import CamelModel


class ProfileRead(CamelModel):
    """Response schema for reading a profile."""

    id: str
    email: str
    name: str | None
    role: UserRole
    avatar: str | None
    is_superadmin: bool = Field(alias="is_superadmin")
    created_at: datetime


class ProfileUpdate(CamelModel):
    """Request schema for updating a profile. Role is not editable."""

    name: str | None = Field(None, max_length=255)
    avatar: str | None = Field(None, max_length=500)
