"""
Test configuration and fixtures.

Provides:
- Fresh in-memory SQLite schema per test
- Profiles for each role plus explicit UserSession builders
- Identity token minting for authenticated HTTP tests
- HTTPX AsyncClient with proper headers
"""
import os
import uuid
from typing import AsyncGenerator, Generator

# Must be set before the app (and its settings/engine) is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["TESTING"] = "1"
os.environ["ENV"] = "test"
os.environ["RESEND_API_KEY"] = ""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.orm import Session

from app.main import app
from app.core.deps import get_db
from app.core.security import create_identity_token
from app.db.base import Base
from app.db.enums import ProvisioningSource, UserRole
from app.db.models import User
from app.db.session import SessionLocal, engine
from app.schemas.auth import UserSession


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Creates the schema on the shared in-memory engine and drops it afterwards.

    App code commits and rolls back for real, so fixtures commit their rows.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


def make_user(
    db: Session,
    role: UserRole,
    *,
    is_superadmin: bool = False,
    email: str | None = None,
    name: str | None = None,
) -> User:
    suffix = uuid.uuid4().hex[:8]
    user = User(
        id=f"user-{suffix}",
        email=email or f"{role.value.lower()}-{suffix}@test.com",
        name=name or f"{role.value.title()} {suffix}",
        role=role.value,
        is_superadmin=is_superadmin,
        provisioned_via=ProvisioningSource.INVITATION.value,
    )
    db.add(user)
    db.commit()
    return user


def session_for(user: User) -> UserSession:
    return UserSession(
        user_id=user.id,
        email=user.email,
        role=UserRole(user.role),
        is_superadmin=user.is_superadmin,
        name=user.name,
    )


def auth_headers(user_id: str, email: str = "", **metadata) -> dict[str, str]:
    token = create_identity_token(user_id, email, **metadata)
    return {
        "Authorization": f"Bearer {token}",
        "X-Requested-With": "XMLHttpRequest",  # CSRF header
    }


@pytest.fixture(scope="function")
def manager(db: Session) -> User:
    return make_user(db, UserRole.MANAGER)


@pytest.fixture(scope="function")
def other_manager(db: Session) -> User:
    return make_user(db, UserRole.MANAGER)


@pytest.fixture(scope="function")
def freelancer(db: Session) -> User:
    return make_user(db, UserRole.FREELANCER)


@pytest.fixture(scope="function")
def superadmin(db: Session) -> User:
    return make_user(db, UserRole.MANAGER, is_superadmin=True)


@pytest.fixture(scope="function")
def manager_session(manager: User) -> UserSession:
    return session_for(manager)


@pytest.fixture(scope="function")
def freelancer_session(freelancer: User) -> UserSession:
    return session_for(freelancer)


@pytest.fixture(scope="function")
def superadmin_session(superadmin: User) -> UserSession:
    return session_for(superadmin)


# =============================================================================
# Client Fixtures
# =============================================================================

async def _client(db: Session, headers: dict[str, str] | None = None) -> AsyncGenerator[AsyncClient, None]:
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=headers or {},
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated AsyncClient for public endpoints."""
    async for c in _client(db):
        yield c


@pytest.fixture(scope="function")
async def manager_client(db: Session, manager: User) -> AsyncGenerator[AsyncClient, None]:
    async for c in _client(db, auth_headers(manager.id, manager.email)):
        yield c


@pytest.fixture(scope="function")
async def freelancer_client(db: Session, freelancer: User) -> AsyncGenerator[AsyncClient, None]:
    async for c in _client(db, auth_headers(freelancer.id, freelancer.email)):
        yield c


@pytest.fixture(scope="function")
async def superadmin_client(db: Session, superadmin: User) -> AsyncGenerator[AsyncClient, None]:
    async for c in _client(db, auth_headers(superadmin.id, superadmin.email)):
        yield c


# =============================================================================
# Factories
# =============================================================================

@pytest.fixture(scope="function")
def user_factory(db: Session):
    """Create extra committed profiles: user_factory(UserRole.FREELANCER, email=...)."""
    def factory(role: UserRole, **kwargs) -> User:
        return make_user(db, role, **kwargs)
    return factory


@pytest.fixture(scope="function")
def client_factory(db: Session):
    """Build an AsyncClient for an arbitrary identity (profile optional)."""
    def factory(user_id: str, email: str = "", **metadata) -> AsyncClient:
        def override_get_db():
            yield db

        app.dependency_overrides[get_db] = override_get_db
        return AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
            headers=auth_headers(user_id, email, **metadata),
        )

    yield factory
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def session_builder():
    """Turn any profile row into an explicit UserSession."""
    return session_for
