"""Pydantic schemas for API request/response models."""

from app.schemas.auth import IdentityClaims, UserSession
from app.schemas.finance import (
    FinancialDetail,
    FinancialRead,
    FinancialUpdateCreate,
    FinancialUpdateRead,
)
from app.schemas.invite import (
    CompleteInvitationRequest,
    CompleteInvitationResponse,
    InvitationCreate,
    InvitationRead,
    InvitationValidation,
    SendInvitationRequest,
    SendInvitationResponse,
)
from app.schemas.offer import OfferCreate, OfferDecision, OfferDecisionResult, OfferRead
from app.schemas.project import (
    CategoryCreate,
    CategoryRead,
    CategoryStatusCreate,
    CategoryStatusRead,
    ProjectCreate,
    ProjectRead,
    ProjectStatusChange,
)
from app.schemas.user import ProfileRead, ProfileUpdate

__all__ = [
    # Auth
    "IdentityClaims",
    "UserSession",
    # Profile
    "ProfileRead",
    "ProfileUpdate",
    # Invitations
    "InvitationCreate",
    "InvitationRead",
    "InvitationValidation",
    "CompleteInvitationRequest",
    "CompleteInvitationResponse",
    "SendInvitationRequest",
    "SendInvitationResponse",
    # Projects
    "CategoryCreate",
    "CategoryRead",
    "CategoryStatusCreate",
    "CategoryStatusRead",
    "ProjectCreate",
    "ProjectRead",
    "ProjectStatusChange",
    # Offers
    "OfferCreate",
    "OfferDecision",
    "OfferDecisionResult",
    "OfferRead",
    # Finances
    "FinancialDetail",
    "FinancialRead",
    "FinancialUpdateCreate",
    "FinancialUpdateRead",
]
