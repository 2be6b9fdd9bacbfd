"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # App Version (format: a.bc.de - major.feature.patch)
    VERSION: str = "0.01.00"

    # Database (Postgres in production, SQLite file for local dev)
    DATABASE_URL: str = "sqlite:///./offersync.db"

    # Identity tokens issued by the auth provider (supports key rotation)
    JWT_SECRET: str = "change-this-in-production"
    JWT_SECRET_PREVIOUS: str = ""  # Set during rotation, clear after
    JWT_AUDIENCE: str = "authenticated"
    JWT_EXPIRES_HOURS: int = 1

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Frontend (fallback origin for signup links)
    FRONTEND_URL: str = "http://localhost:3000"

    # Invitations
    INVITE_EXPIRY_DAYS: int = 7

    # First-load profile creation for identities without an invitation.
    # Always provisions FREELANCER; disable to make signup invitation-only.
    SELF_HEAL_PROFILES: bool = True

    # Outbound email (Resend)
    RESEND_API_KEY: str = ""
    EMAIL_FROM: str = "OfferSync <no-reply@offersync.local>"

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""

    # Rate Limiting (requests per minute)
    RATE_LIMIT_API: int = 120  # General API
    RATE_LIMIT_INVITE: int = 10  # Public token endpoints

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def jwt_secrets(self) -> list[str]:
        """Returns list of valid secrets (current first, then previous if set)."""
        secrets = [self.JWT_SECRET]
        if self.JWT_SECRET_PREVIOUS:
            secrets.append(self.JWT_SECRET_PREVIOUS)
        return secrets

    @property
    def email_sender_configured(self) -> bool:
        return bool(self.RESEND_API_KEY)


settings = Settings()
