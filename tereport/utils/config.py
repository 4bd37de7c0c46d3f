# ==============================================================================
# Application Configuration
# ==============================================================================
"""
Settings for the upstream services, read from the environment with
pydantic-settings. A .env file in the working directory is loaded first
(python-dotenv), so local credentials need not be exported.

Prefixes: AUTHORING_*, PORTAL_*, LOG_PULLER_*; DEBUG and LOG_LEVEL unprefixed.
"""

from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class AuthoringSettings(BaseSettings):
    """Content-authoring service (activity and sequence exports)."""

    model_config = SettingsConfigDict(env_prefix="AUTHORING_")

    server: str = Field(
        default="authoring.staging.concord.org", description="Authoring server host"
    )
    api_key: Optional[str] = Field(default=None, description="Bearer token for export requests")
    timeout_seconds: float = Field(default=30.0, description="Request timeout in seconds")

    @property
    def base_url(self) -> str:
        return f"https://{self.server}"

    @property
    def auth_headers(self) -> dict[str, str]:
        if self.api_key:
            return {"Authorization": f"Bearer {self.api_key}"}
        return {}


class PortalSettings(BaseSettings):
    """Portal (identity) service used to resolve teacher names."""

    model_config = SettingsConfigDict(env_prefix="PORTAL_")

    server: str = Field(default="learn.staging.concord.org", description="Portal server host")
    token: Optional[str] = Field(default=None, description="Portal bearer token")
    timeout_seconds: float = Field(default=10.0, description="Request timeout in seconds")

    @property
    def base_url(self) -> str:
        return f"https://{self.server}"


class LogPullerSettings(BaseSettings):
    """Log-puller endpoints for retrieving event logs."""

    model_config = SettingsConfigDict(env_prefix="LOG_PULLER_")

    production_url: str = Field(
        default="https://log-puller.herokuapp.com/portal-report",
        description="Log-puller used for production portal requests",
    )
    staging_url: str = Field(
        default="https://log-puller-staging.herokuapp.com/portal-report",
        description="Log-puller used for everything else",
    )
    production_domains: list[str] = Field(
        default=["learn.concord.org", "learn-report.concord.org"],
        description="Portal domains whose requests go to the production log-puller",
    )
    timeout_seconds: float = Field(default=120.0, description="Request timeout in seconds")


class Settings(BaseSettings):
    """Top-level settings: one section per upstream service plus logging."""

    model_config = SettingsConfigDict(
        extra="ignore",
    )

    authoring: AuthoringSettings = Field(default_factory=AuthoringSettings)
    portal: PortalSettings = Field(default_factory=PortalSettings)
    log_puller: LogPullerSettings = Field(default_factory=LogPullerSettings)

    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level.upper()


@lru_cache
def get_settings() -> Settings:
    """Application settings, read once per process (cache_clear() to reload)."""
    return Settings()
