"""Tests for profile provisioning (first-load self-heal) and profile endpoints."""

import pytest


def test_ensure_profile_returns_existing(db, freelancer):
    from app.schemas.auth import IdentityClaims
    from app.services import profile_service

    identity = IdentityClaims(sub=freelancer.id, email=freelancer.email)
    profile, created = profile_service.ensure_profile(db, identity)

    assert created is False
    assert profile.id == freelancer.id


def test_self_heal_creates_freelancer(db):
    from app.db.enums import ProvisioningSource, UserRole
    from app.schemas.auth import IdentityClaims
    from app.services import profile_service

    identity = IdentityClaims(
        sub="user-new", email="new@example.com", user_metadata={"name": "New Person"}
    )
    profile, created = profile_service.ensure_profile(db, identity)
    db.commit()

    assert created is True
    assert profile.role == UserRole.FREELANCER.value
    assert profile.name == "New Person"
    assert profile.provisioned_via == ProvisioningSource.SELF_HEAL.value


def test_self_heal_ignores_claimed_manager_role(db, caplog):
    from app.db.enums import UserRole
    from app.schemas.auth import IdentityClaims
    from app.services import profile_service

    identity = IdentityClaims(
        sub="user-sneaky",
        email="sneaky@example.com",
        user_metadata={"role": "MANAGER"},
    )
    with caplog.at_level("WARNING"):
        profile, created = profile_service.ensure_profile(db, identity)

    assert created is True
    assert profile.role == UserRole.FREELANCER.value
    assert "Ignoring claimed role MANAGER" in caplog.text


def test_self_heal_can_be_disabled(db, monkeypatch):
    from app.core.config import settings
    from app.db.models import User
    from app.schemas.auth import IdentityClaims
    from app.services import profile_service

    monkeypatch.setattr(settings, "SELF_HEAL_PROFILES", False)
    identity = IdentityClaims(sub="user-blocked", email="blocked@example.com")

    with pytest.raises(profile_service.SelfHealDisabledError):
        profile_service.ensure_profile(db, identity)
    assert db.get(User, "user-blocked") is None


def test_update_profile_keeps_role(db, freelancer_session):
    from app.db.enums import UserRole
    from app.services import profile_service

    profile = profile_service.update_profile(
        db, freelancer_session, name="  Renamed  ", avatar=""
    )
    db.commit()

    assert profile.name == "Renamed"
    assert profile.avatar is None
    assert profile.role == UserRole.FREELANCER.value


def test_list_profiles_filters_by_role(db, manager, freelancer, user_factory):
    from app.db.enums import UserRole
    from app.services import profile_service

    second = user_factory(UserRole.FREELANCER)

    ids = {p.id for p in profile_service.list_profiles(db, UserRole.FREELANCER)}
    assert ids == {freelancer.id, second.id}


# =============================================================================
# HTTP
# =============================================================================


@pytest.mark.asyncio
async def test_profile_me_self_heals_on_first_load(db, client_factory):
    from app.db.models import User

    async with client_factory("user-first", "first@example.com", name="First") as c:
        response = await c.get("/profile/me")
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "user-first"
        assert data["role"] == "FREELANCER"
        assert data["name"] == "First"
        assert data["is_superadmin"] is False

        # Second load returns the same row instead of inserting again
        response = await c.get("/profile/me")
        assert response.status_code == 200

    assert db.query(User).filter(User.id == "user-first").count() == 1


@pytest.mark.asyncio
async def test_profile_required_for_other_endpoints(client_factory):
    async with client_factory("user-noprofile", "np@example.com") as c:
        response = await c.get("/projects")
    assert response.status_code == 403
    assert response.json()["detail"] == "Profile not found"


@pytest.mark.asyncio
async def test_invalid_bearer_token_rejected(client):
    response = await client.get(
        "/profile/me", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_patch_profile_me(freelancer_client):
    response = await freelancer_client.patch("/profile/me", json={"name": "Updated"})
    assert response.status_code == 200
    assert response.json()["name"] == "Updated"
    assert response.json()["role"] == "FREELANCER"


@pytest.mark.asyncio
async def test_directory_restricted_to_managers(manager_client, freelancer_client, freelancer):
    response = await manager_client.get("/users", params={"role": "FREELANCER"})
    assert response.status_code == 200
    assert [u["id"] for u in response.json()] == [freelancer.id]

    response = await freelancer_client.get("/users")
    assert response.status_code == 403
