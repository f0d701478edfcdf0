"""Tests for HttpKeyResolutionClient."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from customauth.auth.client import (
    AGGREGATE_KEY_PATH,
    KEY_PATH,
    LOGIN_PATH,
    HttpKeyResolutionClient,
    KeyResolutionClient,
    KeyResolutionClientError,
)
from customauth.auth.models import (
    AggregationRequest,
    AggregationStrategy,
    LoginProvider,
    Network,
    NetworkConfig,
    SubVerifierDescriptor,
)

DESCRIPTOR = SubVerifierDescriptor(
    login_provider=LoginProvider.GOOGLE,
    client_id="g-client",
    verifier="google-v",
    redirect_url="app://cb",
    browser_redirect_url="https://a/b",
)

MAINNET = NetworkConfig(Network.MAINNET)

LOGIN_REQUEST = AggregationRequest(
    strategy=AggregationStrategy.SINGLE_LOGIN,
    aggregate_verifier="google-v",
    sub_verifiers=(DESCRIPTOR,),
)


def _response(status: int = 200, body=None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=body)
    response.text = AsyncMock(return_value=text)
    return response


def _session(response: MagicMock | None = None, enter_error: Exception | None = None) -> MagicMock:
    session = MagicMock()
    session.post.return_value.__aenter__ = AsyncMock(
        return_value=response, side_effect=enter_error
    )
    session.post.return_value.__aexit__ = AsyncMock(return_value=False)
    return session


def _patched(session: MagicMock):
    mock_session_class = patch("aiohttp.ClientSession")
    started = mock_session_class.start()
    started.return_value.__aenter__ = AsyncMock(return_value=session)
    started.return_value.__aexit__ = AsyncMock(return_value=False)
    return mock_session_class


@pytest.fixture
def client() -> HttpKeyResolutionClient:
    return HttpKeyResolutionClient(base_url="https://resolver.example.com/", timeout=5.0)


class TestConstruction:
    def test_defaults_from_settings(self, clean_env, monkeypatch):
        monkeypatch.setenv("CUSTOMAUTH_RESOLVER_URL", "https://gw.example.com/")
        monkeypatch.setenv("CUSTOMAUTH_RESOLVER_TIMEOUT", "12.5")
        client = HttpKeyResolutionClient()
        assert client.base_url == "https://gw.example.com"
        assert client.timeout == 12.5

    def test_explicit_values(self, client):
        assert client.base_url == "https://resolver.example.com"
        assert client.timeout == 5.0

    def test_satisfies_protocol(self, client):
        assert isinstance(client, KeyResolutionClient)


class TestUrls:
    def test_explicit_base_wins_over_network_url(self, client):
        network = NetworkConfig(Network.MAINNET, network_url="https://node.example.com")
        assert client._url(LOGIN_PATH, network) == "https://resolver.example.com/v1/login"

    def test_network_url_used_without_explicit_base(self, clean_env):
        client = HttpKeyResolutionClient()
        network = NetworkConfig(Network.MAINNET, network_url="https://node.example.com/")
        assert client._url(LOGIN_PATH, network) == "https://node.example.com/v1/login"

    def test_settings_base_as_fallback(self, clean_env):
        client = HttpKeyResolutionClient()
        assert client._url(KEY_PATH) == "http://127.0.0.1:8560/v1/key"


class TestRequests:
    async def test_resolve_by_login(self, client):
        session = _session(_response(body={"userInfo": {"email": "a@b"}}))
        patcher = _patched(session)
        try:
            result = await client.resolve_by_login(
                LOGIN_REQUEST, NetworkConfig(Network.TESTNET, enable_one_key=True)
            )
        finally:
            patcher.stop()

        assert result == {"userInfo": {"email": "a@b"}}
        url = session.post.call_args.args[0]
        payload = session.post.call_args.kwargs["json"]
        assert url == "https://resolver.example.com/v1/login"
        assert payload["aggregateVerifierType"] == "single_login"
        assert payload["aggregateVerifier"] == "google-v"
        assert payload["subVerifierDetails"][0]["clientId"] == "g-client"
        assert payload["network"] == "testnet"
        assert payload["enableOneKey"] is True
        assert session.post.call_args.kwargs["timeout"].total == 5.0

    async def test_resolve_by_token(self, client):
        session = _session(_response(body={"publicAddress": "0xabc", "privateKey": "0xdef"}))
        patcher = _patched(session)
        try:
            result = await client.resolve_by_token("v1", "u1", "tok", {"k": "v"}, MAINNET)
        finally:
            patcher.stop()

        assert result["publicAddress"] == "0xabc"
        assert session.post.call_args.args[0] == f"https://resolver.example.com{KEY_PATH}"
        assert session.post.call_args.kwargs["json"] == {
            "verifier": "v1",
            "verifierId": "u1",
            "idToken": "tok",
            "userData": {"k": "v"},
            "network": "mainnet",
            "enableOneKey": False,
            "networkUrl": None,
        }

    async def test_resolve_by_aggregate_token(self, client):
        session = _session(_response(body={"publicAddress": "0x1", "privateKey": "0x2"}))
        patcher = _patched(session)
        try:
            await client.resolve_by_aggregate_token("agg", "u1", "tok", DESCRIPTOR, MAINNET)
        finally:
            patcher.stop()

        assert session.post.call_args.args[0].endswith(AGGREGATE_KEY_PATH)
        payload = session.post.call_args.kwargs["json"]
        assert payload["verifier"] == "agg"
        assert payload["subVerifierDetails"] == DESCRIPTOR.to_dict()
        assert payload["network"] == "mainnet"

    async def test_token_calls_follow_session_network(self, clean_env):
        client = HttpKeyResolutionClient()
        network = NetworkConfig(Network.CELESTE, True, "https://node.example.com")
        session = _session(_response(body={"publicAddress": "0x1", "privateKey": "0x2"}))
        patcher = _patched(session)
        try:
            await client.resolve_by_token("v1", "u1", "tok", {}, network)
            key_call = session.post.call_args
            await client.resolve_by_aggregate_token("agg", "u1", "tok", DESCRIPTOR, network)
            aggregate_call = session.post.call_args
        finally:
            patcher.stop()

        assert key_call.args[0] == "https://node.example.com/v1/key"
        assert aggregate_call.args[0] == "https://node.example.com/v1/aggregate-key"
        for call in (key_call, aggregate_call):
            payload = call.kwargs["json"]
            assert payload["network"] == "celeste"
            assert payload["enableOneKey"] is True
            assert payload["networkUrl"] == "https://node.example.com"


class TestErrors:
    async def test_non_200_with_json_error(self, client):
        session = _session(_response(status=401, body={"error": {"message": "bad token"}}))
        patcher = _patched(session)
        try:
            with pytest.raises(KeyResolutionClientError) as exc_info:
                await client.resolve_by_token("v1", "u1", "tok", {}, MAINNET)
        finally:
            patcher.stop()
        assert exc_info.value.status == 401
        assert str(exc_info.value) == "HTTP 401: bad token"

    async def test_non_200_with_text_body(self, client):
        response = _response(status=502, text="Bad Gateway")
        response.json = AsyncMock(side_effect=ValueError("not json"))
        patcher = _patched(_session(response))
        try:
            with pytest.raises(KeyResolutionClientError, match="HTTP 502: Bad Gateway"):
                await client.resolve_by_token("v1", "u1", "tok", {}, MAINNET)
        finally:
            patcher.stop()

    async def test_invalid_json(self, client):
        response = _response()
        response.json = AsyncMock(side_effect=ValueError("Expecting value"))
        patcher = _patched(_session(response))
        try:
            with pytest.raises(KeyResolutionClientError, match="Invalid JSON response"):
                await client.resolve_by_token("v1", "u1", "tok", {}, MAINNET)
        finally:
            patcher.stop()

    async def test_timeout(self, client):
        patcher = _patched(_session(enter_error=TimeoutError()))
        try:
            with pytest.raises(KeyResolutionClientError, match="Timed out after 5.0s"):
                await client.resolve_by_token("v1", "u1", "tok", {}, MAINNET)
        finally:
            patcher.stop()

    async def test_connection_error(self, client):
        patcher = _patched(_session(enter_error=aiohttp.ClientConnectionError("refused")))
        try:
            with pytest.raises(KeyResolutionClientError, match="refused") as exc_info:
                await client.resolve_by_token("v1", "u1", "tok", {}, MAINNET)
        finally:
            patcher.stop()
        assert exc_info.value.status is None
