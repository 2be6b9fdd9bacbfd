"""Platform email sender (Resend API).

Used for system emails such as invitations. Returns result dicts instead of
raising so callers can decide whether a failed send is fatal.
"""

from __future__ import annotations

import logging

import httpx

from app.core.config import settings
from app.services.http_service import post_json_with_retries

logger = logging.getLogger(__name__)

RESEND_SEND_URL = "https://api.resend.com/emails"
RESEND_MAX_ATTEMPTS = 3
RESEND_RETRY_BASE_DELAY = 0.5
RESEND_RETRY_MAX_DELAY = 4.0
RESEND_TIMEOUT_SECONDS = 20.0


def sender_configured() -> bool:
    return settings.email_sender_configured


def _error_detail(response: httpx.Response) -> str | None:
    """Best-effort parse of an error response."""
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        detail = data.get("message") or data.get("error")
        return str(detail) if detail else None
    return None


async def send_email(
    *,
    to_email: str,
    subject: str,
    html: str,
    text: str | None = None,
    idempotency_key: str | None = None,
) -> dict:
    """
    Send one email via Resend.

    Returns:
        {"success": True, "message_id": "..."} or {"success": False, "error": "..."}
    """
    if not sender_configured():
        return {"success": False, "error": "Email sender not configured (missing RESEND_API_KEY)"}

    payload: dict[str, object] = {
        "from": settings.EMAIL_FROM,
        "to": [to_email],
        "subject": subject,
        "html": html,
    }
    if text:
        payload["text"] = text

    headers = {
        "Authorization": f"Bearer {settings.RESEND_API_KEY}",
        "Content-Type": "application/json",
    }
    if idempotency_key:
        headers["Idempotency-Key"] = idempotency_key

    try:
        async with httpx.AsyncClient(timeout=RESEND_TIMEOUT_SECONDS) as client:
            response = await post_json_with_retries(
                client,
                RESEND_SEND_URL,
                json=payload,
                headers=headers,
                max_attempts=RESEND_MAX_ATTEMPTS,
                base_delay=RESEND_RETRY_BASE_DELAY,
                max_delay=RESEND_RETRY_MAX_DELAY,
            )
    except httpx.TimeoutException:
        logger.warning("Resend timeout sending %s", idempotency_key or "email")
        return {"success": False, "error": "Connection timeout"}
    except httpx.RequestError as exc:
        logger.warning("Resend request failed: %s", exc)
        return {"success": False, "error": "Email provider unreachable"}

    if 200 <= response.status_code < 300:
        message_id = response.json().get("id")
        if isinstance(message_id, str) and message_id:
            return {"success": True, "message_id": message_id}
        return {"success": False, "error": "Resend API returned success without message id"}

    # 409 is an idempotency replay: the message already went out
    if response.status_code == 409:
        return {"success": True}

    detail = _error_detail(response)
    if detail:
        return {"success": False, "error": f"Resend API error: {response.status_code} ({detail})"}
    return {"success": False, "error": f"Resend API error: {response.status_code}"}
