"""SQLAlchemy ORM models."""

from app.db.models.auth import Invitation, User
from app.db.models.finance import Financial, FinancialUpdate
from app.db.models.projects import CategoryStatus, Offer, Project, ProjectCategory

__all__ = [
    "CategoryStatus",
    "Financial",
    "FinancialUpdate",
    "Invitation",
    "Offer",
    "Project",
    "ProjectCategory",
    "User",
]
