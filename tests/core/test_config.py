"""Tests for customauth.core.config - CoreSettings and global config management.

Tests cover:
- Settings loading with defaults
- Environment variable overrides
- Singleton behavior (get_config / clear_config_cache)
- Validation of the resolver URL, timeout and log format
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from customauth.core.config import (
    CoreSettings,
    clear_config_cache,
    get_config,
)

# ============================================================================
# CoreSettings - Default Values
# ============================================================================


class TestCoreSettingsDefaults:
    """Test that CoreSettings loads with correct default values."""

    def test_resolver_defaults(self, clean_env):
        settings = CoreSettings()

        assert settings.resolver_url == "http://127.0.0.1:8560"
        assert settings.resolver_timeout == 30.0
        assert settings.default_network == "mainnet"

    def test_logging_defaults(self, clean_env):
        settings = CoreSettings()

        assert settings.log_level == "INFO"
        assert settings.log_format == ""
        assert settings.log_file is None


# ============================================================================
# CoreSettings - Environment Overrides
# ============================================================================


class TestCoreSettingsEnvironment:
    def test_resolver_overrides(self, clean_env, monkeypatch):
        monkeypatch.setenv("CUSTOMAUTH_RESOLVER_URL", "https://resolver.example.com/")
        monkeypatch.setenv("CUSTOMAUTH_RESOLVER_TIMEOUT", "5")
        monkeypatch.setenv("CUSTOMAUTH_DEFAULT_NETWORK", "testnet")

        settings = CoreSettings()

        assert settings.resolver_url == "https://resolver.example.com/"
        assert settings.resolver_base_url == "https://resolver.example.com"
        assert settings.resolver_timeout == 5.0
        assert settings.default_network == "testnet"

    def test_logging_overrides(self, clean_env, monkeypatch):
        monkeypatch.setenv("CUSTOMAUTH_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("CUSTOMAUTH_LOG_FORMAT", "json")
        monkeypatch.setenv("CUSTOMAUTH_LOG_FILE", "/tmp/customauth.log")

        settings = CoreSettings()

        assert settings.log_level == "DEBUG"
        assert settings.log_format == "json"
        assert settings.log_file == "/tmp/customauth.log"


# ============================================================================
# Global config management
# ============================================================================


class TestGetConfig:
    def test_returns_singleton(self, clean_env):
        assert get_config() is get_config()

    def test_clear_cache_creates_new_instance(self, clean_env, monkeypatch):
        first = get_config()
        monkeypatch.setenv("CUSTOMAUTH_RESOLVER_URL", "https://other.example.com")
        assert get_config().resolver_url == first.resolver_url

        clear_config_cache()

        second = get_config()
        assert second is not first
        assert second.resolver_url == "https://other.example.com"


# ============================================================================
# CoreSettings - Validation
# ============================================================================


class TestCoreSettingsValidation:
    def test_timeout_must_be_positive(self, clean_env, monkeypatch):
        monkeypatch.setenv("CUSTOMAUTH_RESOLVER_TIMEOUT", "0")
        with pytest.raises(ValidationError):
            CoreSettings()

    def test_resolver_url_must_be_http(self, clean_env, monkeypatch):
        monkeypatch.setenv("CUSTOMAUTH_RESOLVER_URL", "ftp://resolver.example.com")
        with pytest.raises(ValidationError):
            CoreSettings()

    def test_log_format_case_insensitive(self, clean_env, monkeypatch):
        monkeypatch.setenv("CUSTOMAUTH_LOG_FORMAT", "JSON")
        assert CoreSettings().log_format == "json"

    def test_unknown_log_format(self, clean_env, monkeypatch):
        monkeypatch.setenv("CUSTOMAUTH_LOG_FORMAT", "xml")
        with pytest.raises(ValidationError):
            CoreSettings()
