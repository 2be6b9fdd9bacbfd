"""Enum definitions for application constants.

Values are part of the backend contract and must not change.
"""

from app.db.enums.auth import ProvisioningSource, UserRole
from app.db.enums.finance import PaymentStatus
from app.db.enums.permissions import (
    INVITABLE_ROLES_BY_MANAGER,
    ROLES_CAN_INVITE,
    ROLES_CAN_MANAGE_PROJECTS,
    ROLES_CAN_SUBMIT_OFFERS,
    ROLES_CAN_VIEW_DIRECTORY,
)
from app.db.enums.projects import MessagePlatform, OfferStatus, ProjectStatus

DEFAULT_PROJECT_STATUS = ProjectStatus.OPEN
DEFAULT_OFFER_STATUS = OfferStatus.PENDING
DEFAULT_PAYMENT_STATUS = PaymentStatus.PENDING
DEFAULT_SELF_HEAL_ROLE = UserRole.FREELANCER

__all__ = [
    "DEFAULT_OFFER_STATUS",
    "DEFAULT_PAYMENT_STATUS",
    "DEFAULT_PROJECT_STATUS",
    "DEFAULT_SELF_HEAL_ROLE",
    "INVITABLE_ROLES_BY_MANAGER",
    "MessagePlatform",
    "OfferStatus",
    "PaymentStatus",
    "ProjectStatus",
    "ProvisioningSource",
    "ROLES_CAN_INVITE",
    "ROLES_CAN_MANAGE_PROJECTS",
    "ROLES_CAN_SUBMIT_OFFERS",
    "ROLES_CAN_VIEW_DIRECTORY",
    "UserRole",
]
