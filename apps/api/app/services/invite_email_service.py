"""Invitation email content and dispatch."""

import html
import logging
from datetime import datetime

from app.db.models import Invitation
from app.db.types import utc_now
from app.services import email_sender

logger = logging.getLogger(__name__)

APP_NAME = "OfferSync"


def _format_expiry(expires_at: datetime | None, now: datetime | None = None) -> str | None:
    """Human expiry hint: 'in 7 days', 'in 1 day', or 'soon'."""
    if not expires_at:
        return None
    days_remaining = (expires_at - (now or utc_now())).days
    if days_remaining > 0:
        return f"in {days_remaining} day{'s' if days_remaining != 1 else ''}"
    return "soon"


def build_invitation_text(
    role: str,
    signup_url: str,
    inviter_name: str | None,
    expires: str | None,
) -> str:
    """Build plain text email body for an invitation."""
    inviter_text = f" by {inviter_name}" if inviter_name else ""
    expiry_text = f"\nThis invitation expires {expires}.\n" if expires else ""

    return f"""You're invited to join {APP_NAME}

You've been invited{inviter_text} to join {APP_NAME} as a {role.title()}.

Create your account here:
{signup_url}
{expiry_text}
If you didn't expect this invitation, you can safely ignore this email.
"""


def build_invitation_html(
    role: str,
    signup_url: str,
    inviter_name: str | None,
    expires: str | None,
) -> str:
    inviter_text = f" by {html.escape(inviter_name)}" if inviter_name else ""
    expires_block = f"<p>This invitation expires {expires}.</p>" if expires else ""
    url = html.escape(signup_url, quote=True)
    return (
        f"<h2>You're invited to join {APP_NAME}</h2>"
        f"<p>You've been invited{inviter_text} to join {APP_NAME} as a "
        f"<strong>{html.escape(role.title())}</strong>.</p>"
        f'<p><a href="{url}">Create your account</a></p>'
        f"{expires_block}"
        "<p>If you didn't expect this invitation, you can safely ignore this email.</p>"
    )


async def send_invitation_email(
    invitation: Invitation,
    signup_url: str,
    inviter_name: str | None = None,
) -> dict:
    """
    Email the signup link to the invitation's target address.

    Returns:
        {"success": True, "message_id": "..."} or {"success": False, "error": "..."}
    """
    if not invitation.email:
        return {"success": False, "error": "Invitation has no target email"}

    expires = _format_expiry(invitation.expires_at)
    subject = f"You're invited to join {APP_NAME}"
    text_body = build_invitation_text(invitation.role, signup_url, inviter_name, expires)
    html_body = build_invitation_html(invitation.role, signup_url, inviter_name, expires)

    result = await email_sender.send_email(
        to_email=invitation.email,
        subject=subject,
        html=html_body,
        text=text_body,
        idempotency_key=f"invitation/{invitation.id}",
    )
    if not result.get("success"):
        logger.warning("Invitation email for %s failed: %s", invitation.id, result.get("error"))
    return result
