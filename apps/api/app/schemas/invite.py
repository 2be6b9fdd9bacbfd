"""Invitation-related Pydantic schemas.

The invitations table uses snake_case columns, so these models do too.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.db.enums import UserRole


class InvitationCreate(BaseModel):
    """
    Request schema for generating a signup link.

    A blank email produces an open link for the role.
    """
    role: UserRole
    email: str = ""

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return (v or "").strip().lower()


class InvitationRead(BaseModel):
    """Response schema for an issued invitation."""
    id: str
    token: str
    email: str
    role: UserRole
    invited_by: str
    status: str  # pending | used | expired
    signup_url: str
    created_at: datetime
    expires_at: datetime
    used_at: datetime | None


class InvitationValidation(BaseModel):
    """Echoed back to pre-fill and lock the signup form."""
    role: UserRole
    email: str
    expires_at: datetime


class CompleteInvitationRequest(BaseModel):
    """Body of POST /functions/complete-invitation."""
    token: str = ""
    userId: str = ""
    name: str | None = Field(None, max_length=255)


class CompleteInvitationResponse(BaseModel):
    success: bool
    message: str
    role: UserRole


class SendInvitationRequest(BaseModel):
    """Body of POST /functions/send-invitation."""
    email: str = ""
    role: UserRole | None = None


class SendInvitationResponse(BaseModel):
    success: bool
    message: str
    invitationId: str
    invitationUrl: str
    token: str
