"""
Configuration management for the Storefront Admin API.

Loads settings from .env via pydantic-settings.

Security notes:
    - validate_production_settings() enforces strict CORS in production
    - Webhook verification fails closed when STRIPE_WEBHOOK_SECRET is unset
"""
import logging

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── Database ────────────────────────────────────────────────────
    database_url: str = "sqlite:///./data/storefront_admin.db"

    # ── Stripe ──────────────────────────────────────────────────────
    stripe_api_key: str = ""
    stripe_webhook_secret: str = ""
    stripe_webhook_tolerance_seconds: int = 300  # max age of a signed event
    checkout_currency: str = "USD"

    # ── Storefront ──────────────────────────────────────────────────
    frontend_store_url: str = "http://localhost:3001"

    # ── Application ─────────────────────────────────────────────────
    environment: str = "development"

    # ── Auth (JWT issued by the identity provider) ──────────────────
    jwt_secret: str = ""
    jwt_issuer: str = "storefront-admin"
    jwt_access_ttl_minutes: int = 60
    sign_in_url: str = "/sign-in"

    # ── CORS ────────────────────────────────────────────────────────
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:3001,http://127.0.0.1:3001"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # allow unknown .env keys without crashing
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def checkout_success_url(self) -> str:
        return f"{self.frontend_store_url.rstrip('/')}/cart?success=1"

    @property
    def checkout_cancel_url(self) -> str:
        return f"{self.frontend_store_url.rstrip('/')}/cart?canceled=1"

    def validate_production_settings(self):
        """
        Validate settings for production safety.

        Called during app startup. Raises in production when a secret is
        missing or CORS is open; only warns in other environments.
        """
        if self.environment == "production":
            if "*" in self.cors_origins:
                raise ValueError(
                    "CORS_ORIGINS must not contain '*' in production. "
                    "Set explicit allowed origins."
                )
            if not self.stripe_webhook_secret:
                raise ValueError(
                    "STRIPE_WEBHOOK_SECRET must be set in production. "
                    "Without it every webhook delivery is rejected."
                )
            if not self.stripe_api_key:
                raise ValueError(
                    "STRIPE_API_KEY must be set in production. "
                    "It is used to create checkout sessions."
                )
            if not self.jwt_secret:
                raise ValueError(
                    "JWT_SECRET must be set in production. "
                    "It is used to verify dashboard access tokens."
                )
            logger.info("✅ Production settings validated")
        else:
            warnings = []
            if not self.stripe_webhook_secret:
                warnings.append("STRIPE_WEBHOOK_SECRET not set (webhooks will be rejected)")
            if not self.stripe_api_key:
                warnings.append("STRIPE_API_KEY not set (checkout disabled)")
            if "*" in self.cors_origins:
                warnings.append("CORS_ORIGINS contains '*' (open access)")
            for w in warnings:
                logger.warning(f"⚠️  {w}")


# Global settings instance
settings = Settings()
