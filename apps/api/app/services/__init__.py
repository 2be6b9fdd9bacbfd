"""Service layer modules."""

# Import service modules (not individual functions) for cleaner access
from app.services import finance_service
from app.services import invite_service
from app.services import offer_service
from app.services import profile_service
from app.services import project_service

__all__ = [
    "finance_service",
    "invite_service",
    "offer_service",
    "profile_service",
    "project_service",
]
