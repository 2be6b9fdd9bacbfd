"""Project and offer enums."""

from enum import Enum


class ProjectStatus(str, Enum):
    """
    Project lifecycle.

    OPEN -> IN_PROGRESS happens on offer acceptance; the remaining
    transitions are manual manager actions.
    """

    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class OfferStatus(str, Enum):
    """Offer decision state. ACCEPTED and REJECTED are terminal."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class MessagePlatform(str, Enum):
    """Channels a project conversation can run on."""

    IN_APP = "IN_APP"
    WHATSAPP = "WHATSAPP"
    TELEGRAM = "TELEGRAM"
