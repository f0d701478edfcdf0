"""Core configuration - process-wide settings for the customauth package.

These are environment-driven settings (logging, resolver endpoint). The
per-session login configuration supplied by ``init`` lives in
:mod:`customauth.auth.config_store`, not here.

Usage:
    from customauth.core.config import get_config
    config = get_config()

    resolver_url = config.resolver_url
    log_level = config.log_level
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CoreSettings(BaseSettings):
    """Process-wide CustomAuth settings.

    Read from ``CUSTOMAUTH_*`` environment variables or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -- key resolution gateway ---------------------------------------------

    resolver_url: str = Field(
        default="http://127.0.0.1:8560",
        description="Base URL of the key resolution gateway",
        validation_alias="CUSTOMAUTH_RESOLVER_URL",
    )
    resolver_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Total timeout in seconds for one resolution request",
        validation_alias="CUSTOMAUTH_RESOLVER_TIMEOUT",
    )
    default_network: str = Field(
        default="mainnet",
        description="Network used by the CLI when --network is not given",
        validation_alias="CUSTOMAUTH_DEFAULT_NETWORK",
    )

    # -- logging --------------------------------------------------------------

    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
        validation_alias="CUSTOMAUTH_LOG_LEVEL",
    )
    log_format: Literal["", "json", "text"] = Field(
        default="",
        description="'json', 'text', or empty to pick by terminal",
        validation_alias="CUSTOMAUTH_LOG_FORMAT",
    )
    log_file: str | None = Field(
        default=None,
        description="Also write JSON logs to this file",
        validation_alias="CUSTOMAUTH_LOG_FILE",
    )

    @field_validator("resolver_url")
    @classmethod
    def _http_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("resolver URL must start with http:// or https://")
        return value

    @field_validator("log_format", mode="before")
    @classmethod
    def _lower_format(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    @property
    def resolver_base_url(self) -> str:
        """Resolver URL without a trailing slash."""
        return self.resolver_url.rstrip("/")


_config: CoreSettings | None = None


def get_config() -> CoreSettings:
    """Return the process-wide settings, loading them on first use."""
    global _config
    if _config is None:
        _config = CoreSettings()
    return _config


def clear_config_cache() -> None:
    """Forget loaded settings so the next get_config() re-reads the environment."""
    global _config
    _config = None
