# SPDX-License-Identifier: MIT
# Copyright (c) 2026 CustomAuth Contributors

"""Key resolution collaborator.

:class:`KeyResolutionClient` is the protocol the orchestrator consumes.
:class:`HttpKeyResolutionClient` implements it against a JSON gateway in
front of the threshold key management network. Exactly one HTTP attempt is
made per call; retry and backoff belong to the gateway.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

import aiohttp

from customauth.auth.models import AggregationRequest, NetworkConfig, SubVerifierDescriptor

logger = logging.getLogger(__name__)

LOGIN_PATH = "/v1/login"
KEY_PATH = "/v1/key"
AGGREGATE_KEY_PATH = "/v1/aggregate-key"


class KeyResolutionClientError(Exception):
    """Raised by :class:`HttpKeyResolutionClient` for any failed request."""

    def __init__(self, message: str, status: int | None = None):
        self.status = status
        super().__init__(message)


@runtime_checkable
class KeyResolutionClient(Protocol):
    """Operations offered by the key management network."""

    async def resolve_by_login(
        self, request: AggregationRequest, network: NetworkConfig
    ) -> Any: ...

    async def resolve_by_token(
        self,
        verifier: str,
        verifier_id: str,
        id_token: str,
        user_data: dict[str, str],
        network: NetworkConfig,
    ) -> dict[str, Any]: ...

    async def resolve_by_aggregate_token(
        self,
        verifier: str,
        verifier_id: str,
        id_token: str,
        sub_verifier: SubVerifierDescriptor,
        network: NetworkConfig,
    ) -> dict[str, Any]: ...


class HttpKeyResolutionClient:
    """aiohttp client for the key resolution gateway.

    Base URL precedence: constructor argument, then the session's
    ``network_url``, then ``CUSTOMAUTH_RESOLVER_URL``. Every request body
    carries the session's network settings.
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        from customauth.core.config import get_config

        config = get_config()
        self._explicit_base_url = base_url.rstrip("/") if base_url else None
        self.base_url = self._explicit_base_url or config.resolver_base_url
        self.timeout = timeout if timeout is not None else config.resolver_timeout

    def _url(self, path: str, network: NetworkConfig | None = None) -> str:
        base = self._explicit_base_url
        if base is None and network is not None and network.network_url:
            base = network.network_url.rstrip("/")
        return f"{base or self.base_url}{path}"

    async def _post(self, url: str, payload: dict[str, Any]) -> Any:
        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    url,
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as response:
                    if response.status != 200:
                        message = await self._error_message(response)
                        raise KeyResolutionClientError(
                            f"HTTP {response.status}: {message}", status=response.status
                        )
                    try:
                        return await response.json()
                    except (aiohttp.ContentTypeError, ValueError) as e:
                        raise KeyResolutionClientError(f"Invalid JSON response: {e}") from e
        except TimeoutError as e:
            raise KeyResolutionClientError(f"Timed out after {self.timeout}s") from e
        except aiohttp.ClientError as e:
            raise KeyResolutionClientError(str(e)) from e

    @staticmethod
    async def _error_message(response: Any) -> str:
        try:
            body = await response.json()
        except (aiohttp.ContentTypeError, ValueError):
            return await response.text()
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict):
                return str(error.get("message", error))
            if error:
                return str(error)
            if "message" in body:
                return str(body["message"])
        return str(body)

    async def resolve_by_login(self, request: AggregationRequest, network: NetworkConfig) -> Any:
        payload = {**request.to_dict(), **network.to_dict()}
        logger.debug(
            f"Resolving login for {request.aggregate_verifier} "
            f"({request.strategy.value}, {len(request.sub_verifiers)} sub-verifiers)"
        )
        return await self._post(self._url(LOGIN_PATH, network), payload)

    async def resolve_by_token(
        self,
        verifier: str,
        verifier_id: str,
        id_token: str,
        user_data: dict[str, str],
        network: NetworkConfig,
    ) -> dict[str, Any]:
        payload = {
            "verifier": verifier,
            "verifierId": verifier_id,
            "idToken": id_token,
            "userData": user_data,
            **network.to_dict(),
        }
        logger.debug(f"Resolving key for verifier {verifier} on {network.network.value}")
        return await self._post(self._url(KEY_PATH, network), payload)

    async def resolve_by_aggregate_token(
        self,
        verifier: str,
        verifier_id: str,
        id_token: str,
        sub_verifier: SubVerifierDescriptor,
        network: NetworkConfig,
    ) -> dict[str, Any]:
        payload = {
            "verifier": verifier,
            "verifierId": verifier_id,
            "idToken": id_token,
            "subVerifierDetails": sub_verifier.to_dict(),
            **network.to_dict(),
        }
        logger.debug(
            f"Resolving aggregate key for verifier {verifier} on {network.network.value}"
        )
        return await self._post(self._url(AGGREGATE_KEY_PATH, network), payload)
