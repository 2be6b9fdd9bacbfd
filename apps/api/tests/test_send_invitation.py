"""Tests for emailed invitations (send-invitation)."""

from unittest.mock import AsyncMock, patch

import pytest


@pytest.mark.asyncio
async def test_send_invitation_success(db, manager_session):
    from app.db.enums import UserRole
    from app.db.models import Invitation
    from app.services import invite_service

    with patch(
        "app.services.invite_email_service.send_invitation_email",
        new=AsyncMock(return_value={"success": True, "message_id": "msg_1"}),
    ) as mock_send:
        invitation, url = await invite_service.send_invitation(
            db, manager_session, "Talent@Example.com", UserRole.FREELANCER, "https://app.test"
        )
        db.commit()

    assert invitation.email == "talent@example.com"
    assert url == f"https://app.test/auth?token={invitation.token}"
    mock_send.assert_awaited_once()
    assert db.query(Invitation).count() == 1


@pytest.mark.asyncio
async def test_send_invitation_rolls_back_on_email_failure(db, manager_session):
    from app.db.enums import UserRole
    from app.db.models import Invitation
    from app.services import invite_service

    with patch(
        "app.services.invite_email_service.send_invitation_email",
        new=AsyncMock(return_value={"success": False, "error": "Resend API error: 500"}),
    ):
        with pytest.raises(invite_service.InvitationDeliveryError, match="Resend API error"):
            await invite_service.send_invitation(
                db, manager_session, "talent@example.com", UserRole.FREELANCER
            )

    assert db.query(Invitation).count() == 0


@pytest.mark.asyncio
async def test_send_invitation_validation(db, manager_session, freelancer):
    from app.db.enums import UserRole
    from app.services import invite_service

    with pytest.raises(invite_service.InvalidInvitationRequest, match="Missing email or role"):
        await invite_service.send_invitation(db, manager_session, "", UserRole.FREELANCER)
    with pytest.raises(invite_service.InvalidInvitationRequest, match="Missing email or role"):
        await invite_service.send_invitation(db, manager_session, "a@b.com", None)
    with pytest.raises(invite_service.InvalidInvitationRequest, match="Invalid email format"):
        await invite_service.send_invitation(db, manager_session, "not-an-email", UserRole.FREELANCER)
    with pytest.raises(invite_service.InvalidInvitationRequest, match="already exists"):
        await invite_service.send_invitation(
            db, manager_session, freelancer.email.upper(), UserRole.FREELANCER
        )


@pytest.mark.asyncio
async def test_send_invitation_rejects_duplicate_pending(db, manager_session):
    from app.db.enums import UserRole
    from app.services import invite_service

    invite_service.generate_signup_link(db, manager_session, UserRole.FREELANCER, "dup@example.com")
    db.commit()

    with pytest.raises(invite_service.InvalidInvitationRequest, match="Pending invitation"):
        await invite_service.send_invitation(
            db, manager_session, "dup@example.com", UserRole.FREELANCER
        )


@pytest.mark.asyncio
async def test_send_invitation_without_sender_configured(db, manager_session):
    """With no RESEND_API_KEY the email fails and nothing is kept."""
    from app.db.enums import UserRole
    from app.db.models import Invitation
    from app.services import invite_service

    with pytest.raises(invite_service.InvitationDeliveryError, match="not configured"):
        await invite_service.send_invitation(
            db, manager_session, "nokey@example.com", UserRole.FREELANCER
        )
    assert db.query(Invitation).count() == 0


@pytest.mark.asyncio
async def test_send_invitation_endpoint(db, manager_client):
    from app.db.models import Invitation

    with patch(
        "app.services.invite_email_service.send_invitation_email",
        new=AsyncMock(return_value={"success": True, "message_id": "msg_2"}),
    ):
        response = await manager_client.post(
            "/functions/send-invitation",
            json={"email": "new@example.com", "role": "FREELANCER"},
            headers={"Origin": "https://app.test"},
        )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["invitationUrl"] == f"https://app.test/auth?token={data['token']}"
    assert db.get(Invitation, data["invitationId"]).email == "new@example.com"


@pytest.mark.asyncio
async def test_send_invitation_endpoint_email_failure(db, manager_client):
    from app.db.models import Invitation

    with patch(
        "app.services.invite_email_service.send_invitation_email",
        new=AsyncMock(return_value={"success": False, "error": "boom"}),
    ):
        response = await manager_client.post(
            "/functions/send-invitation",
            json={"email": "new@example.com", "role": "FREELANCER"},
        )

    assert response.status_code == 502
    assert db.query(Invitation).count() == 0


@pytest.mark.asyncio
async def test_send_manager_invitation_requires_superadmin(manager_client):
    response = await manager_client.post(
        "/functions/send-invitation",
        json={"email": "boss@example.com", "role": "MANAGER"},
    )
    assert response.status_code == 403


def test_invitation_email_content():
    from app.services import invite_email_service

    text = invite_email_service.build_invitation_text(
        "FREELANCER", "https://app.test/auth?token=t", "Alex", "January 1, 2030"
    )
    html = invite_email_service.build_invitation_html(
        "FREELANCER", "https://app.test/auth?token=t", "Alex", "January 1, 2030"
    )
    assert "https://app.test/auth?token=t" in text
    assert "https://app.test/auth?token=t" in html
