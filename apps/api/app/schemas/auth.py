"""Authentication-related Pydantic schemas."""

from pydantic import BaseModel

from app.db.enums import UserRole


class IdentityClaims(BaseModel):
    """Decoded identity token issued by the auth provider."""
    sub: str  # identity id
    email: str = ""
    user_metadata: dict = {}

    @property
    def metadata_name(self) -> str | None:
        name = self.user_metadata.get("name")
        return name if isinstance(name, str) and name.strip() else None

    @property
    def metadata_role(self) -> str | None:
        role = self.user_metadata.get("role")
        return role if isinstance(role, str) else None


class UserSession(BaseModel):
    """
    Full session context for authenticated requests.

    Built from the identity token plus the profile row and passed
    explicitly to every workflow function.
    """
    user_id: str
    email: str
    role: UserRole  # Validated enum
    is_superadmin: bool = False
    name: str | None = None
