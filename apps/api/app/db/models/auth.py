"""SQLAlchemy ORM models for profiles and invitations."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.db.types import new_id, utc_now


class User(Base):
    """
    Application profile for an authenticated identity.

    The primary key IS the identity id issued by the auth provider, so an
    identity can own at most one profile. Role is fixed at creation.
    """

    __tablename__ = "User"
    __table_args__ = (Index("ix_user_role", "role"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    avatar: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_superadmin: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=text("false"), nullable=False
    )
    # Distinguishes invitation signups from first-load self-heal
    provisioned_via: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column("createdAt", default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        "updatedAt", default=utc_now, onupdate=utc_now, nullable=False
    )


class Invitation(Base):
    """
    Single-use, time-boxed signup grant for a role.

    An empty email produces an open link usable by anyone who holds it.
    Inert once used_at is set or expires_at has passed.
    """

    __tablename__ = "invitations"
    __table_args__ = (
        Index("ix_invitations_invited_by", "invited_by"),
        Index("ix_invitations_email", "email"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    token: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    invited_by: Mapped[str] = mapped_column(
        String(64), ForeignKey("User.id", ondelete="CASCADE"), nullable=False
    )
    expires_at: Mapped[datetime] = mapped_column(nullable=False)
    used_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now, nullable=False)
