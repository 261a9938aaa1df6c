"""
Configuration Management for Garry
==================================
Centralized configuration for the auth/warranty service endpoints, the
token store and display defaults.
"""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from garry.i18n import AppLocale


def default_token_file() -> str:
    """Token file under the user's config directory."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return str(base / "garry" / "tokens.json")


class ServiceConfig(BaseModel):
    """Configuration for one remote service."""

    name: str
    base_url: str = Field(description="Base URL including the /api/v1 prefix")

    def endpoint(self, path: str) -> str:
        """Join the base URL and an endpoint path."""
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"


class GarryConfig(BaseModel):
    """Main configuration for the Garry client."""

    auth_service: ServiceConfig = Field(
        default_factory=lambda: ServiceConfig(
            name="auth",
            base_url="http://localhost:8081/api/v1"
        )
    )

    warranty_service: ServiceConfig = Field(
        default_factory=lambda: ServiceConfig(
            name="warranty",
            base_url="http://localhost:8080/api/v1"
        )
    )

    request_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Total timeout per HTTP request"
    )

    token_file: Optional[str] = Field(
        default_factory=default_token_file,
        description="Where access/refresh tokens are persisted (None keeps them in memory)"
    )

    locale: AppLocale = Field(
        default=AppLocale.FRENCH,
        description="Locale for display dates and status labels"
    )

    expiring_days: int = Field(
        default=30,
        ge=0,
        description="Default look-ahead for the expiring warranties query"
    )

    log_level: str = Field(default="INFO")

    @classmethod
    def from_env(cls) -> "GarryConfig":
        """Load configuration from environment variables."""

        auth_service = ServiceConfig(
            name="auth",
            base_url=os.environ.get("GARRY_AUTH_URL", "http://localhost:8081/api/v1")
        )

        warranty_service = ServiceConfig(
            name="warranty",
            base_url=os.environ.get("GARRY_API_URL", "http://localhost:8080/api/v1")
        )

        # An empty GARRY_TOKEN_FILE disables persistence
        token_file = os.environ.get("GARRY_TOKEN_FILE")
        if token_file is None:
            token_file = default_token_file()

        return cls(
            auth_service=auth_service,
            warranty_service=warranty_service,
            request_timeout_seconds=float(os.environ.get("GARRY_TIMEOUT_SECONDS", "15")),
            token_file=token_file or None,
            locale=AppLocale.from_value(os.environ.get("GARRY_LOCALE")),
            expiring_days=int(os.environ.get("GARRY_EXPIRING_DAYS", "30")),
            log_level=os.environ.get("GARRY_LOG_LEVEL", "INFO").upper()
        )


# Global config instance
config = GarryConfig.from_env()
