"""Global test fixtures for the CustomAuth test suite."""

from __future__ import annotations

import os
from typing import Any
from unittest.mock import AsyncMock

import pytest

from customauth.auth.config_store import ConfigStore
from customauth.auth.orchestrator import LoginOrchestrator
from customauth.core.config import clear_config_cache

# ============================================================================
# Environment fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_config_cache():
    """Reset the settings singleton before and after each test."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all CUSTOMAUTH_ environment variables."""
    for key in list(os.environ.keys()):
        if key.startswith("CUSTOMAUTH_"):
            monkeypatch.delenv(key, raising=False)


# ============================================================================
# Orchestration fixtures
# ============================================================================

INIT_ARGS: dict[str, Any] = {
    "network": "mainnet",
    "browser_redirect_uri": "https://a/b",
    "redirect_uri": "app://cb",
    "enable_one_key": False,
}


@pytest.fixture
def fake_client() -> AsyncMock:
    """A stand-in for the key resolution backend."""
    client = AsyncMock()
    client.resolve_by_login.return_value = {"userInfo": {"email": "alice@example.com"}}
    client.resolve_by_token.return_value = {
        "publicAddress": "0xabc",
        "privateKey": "0xdef",
        "nonce": "7",
        "typeOfUser": "v1",
    }
    client.resolve_by_aggregate_token.return_value = {
        "publicAddress": "0x123",
        "privateKey": "0x456",
        "metadataNonce": "0",
    }
    return client


@pytest.fixture
def orchestrator(fake_client) -> LoginOrchestrator:
    """An orchestrator that has not been initialized."""
    return LoginOrchestrator(fake_client, ConfigStore())


@pytest.fixture
def initialized_orchestrator(orchestrator) -> LoginOrchestrator:
    """An orchestrator initialized with the standard test session."""
    orchestrator.init(**INIT_ARGS)
    return orchestrator


def assert_backend_untouched(client: AsyncMock) -> None:
    client.resolve_by_login.assert_not_called()
    client.resolve_by_token.assert_not_called()
    client.resolve_by_aggregate_token.assert_not_called()


@pytest.fixture
def backend_untouched():
    return assert_backend_untouched
