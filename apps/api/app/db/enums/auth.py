"""Auth-related enums."""

from enum import Enum


class UserRole(str, Enum):
    """
    Application roles. Set once when the profile is created.

    - MANAGER: posts projects, reviews offers, records payments
    - FREELANCER: bids on open projects
    """

    MANAGER = "MANAGER"
    FREELANCER = "FREELANCER"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_


class ProvisioningSource(str, Enum):
    """How a profile row came into existence."""

    INVITATION = "invitation"
    SELF_HEAL = "self_heal"
