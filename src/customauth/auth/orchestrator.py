# SPDX-License-Identifier: MIT
# Copyright (c) 2026 CustomAuth Contributors

"""Login orchestrator: validate, build descriptors, pick a strategy, resolve.

Every operation follows the same order: take the session snapshot, validate
and build everything, then make exactly one backend call. Validation
failures are raised before the first ``await``, so an invalid request never
reaches the network. Any exception from the backend is wrapped into
:class:`~customauth.core.exceptions.BackendError` at the single call site.

Typical usage::

    orchestrator = LoginOrchestrator(HttpKeyResolutionClient())
    orchestrator.init(
        network="testnet",
        browser_redirect_uri="https://example.com/serviceworker/redirect",
        redirect_uri="com.example.app://auth",
    )
    key = await orchestrator.get_torus_key("my-verifier", "user@example.com", id_token, {})
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable, Mapping, Sequence
from contextlib import contextmanager
from typing import Any, TypeVar

from customauth.auth.aggregation import build_request, resolve_verifier_type
from customauth.auth.client import KeyResolutionClient
from customauth.auth.config_store import AuthArgs, ConfigStore
from customauth.auth.models import AggregationStrategy, KeyResult
from customauth.auth.requests import (
    AggregateLoginParams,
    AggregateTorusKeyParams,
    InitParams,
    SubVerifierInfo,
    SubVerifierParams,
    TorusKeyParams,
    TriggerLoginParams,
    ensure_mapping,
)
from customauth.auth.verifier_details import VerifierDetailBuilder
from customauth.core.exceptions import (
    ArityError,
    BackendError,
    CustomAuthException,
    MethodNotImplementedError,
)
from customauth.core.logging import call_context, call_logger

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LoginOrchestrator:
    """Top-level coordinator for the login and key resolution operations.

    The orchestrator holds no state besides its :class:`ConfigStore`. Each
    operation captures one immutable :class:`AuthArgs` snapshot on entry and
    uses it for the whole call.
    """

    def __init__(self, client: KeyResolutionClient, store: ConfigStore | None = None) -> None:
        self.client = client
        self.store = store or ConfigStore()

    # -- configuration ------------------------------------------------------

    def init(
        self,
        network: str,
        browser_redirect_uri: str,
        redirect_uri: str,
        enable_one_key: bool = False,
        network_url: str | None = None,
    ) -> AuthArgs:
        return self.store.initialize(
            network, browser_redirect_uri, redirect_uri, enable_one_key, network_url
        )

    def reset(self) -> None:
        """Clear the session; later resolution calls raise NotInitializedError."""
        self.store.reset()

    dispose = reset

    # -- typed entry points -------------------------------------------------

    async def trigger_login(
        self,
        type_of_login: str,
        verifier: str,
        client_id: str,
        jwt_params: Mapping[str, str] | None = None,
    ) -> Any:
        """Run a single-login browser flow and return the raw backend payload."""
        return await self._run(
            "triggerLogin",
            {
                "typeOfLogin": type_of_login,
                "verifier": verifier,
                "clientId": client_id,
                "jwtParams": jwt_params,
            },
        )

    async def trigger_aggregate_login(
        self,
        aggregate_verifier_type: str,
        verifier_identifier: str,
        sub_verifier_details: Sequence[SubVerifierParams | Mapping[str, Any]],
    ) -> Any:
        """Run an aggregate login over all sub-verifiers with one backend call."""
        return await self._run(
            "triggerAggregateLogin",
            {
                "aggregateVerifierType": aggregate_verifier_type,
                "verifierIdentifier": verifier_identifier,
                "subVerifierDetailsArray": sub_verifier_details,
            },
        )

    async def get_torus_key(
        self,
        verifier: str,
        verifier_id: str,
        id_token: str,
        verifier_params: Mapping[str, str],
    ) -> dict[str, str]:
        """Resolve a key from a pre-issued ID token.

        Returns exactly ``publicAddress`` and ``privateKey``.
        """
        return await self._run(
            "getTorusKey",
            {
                "verifier": verifier,
                "verifierId": verifier_id,
                "idToken": id_token,
                "verifierParams": verifier_params,
            },
        )

    async def get_aggregate_torus_key(
        self,
        verifier: str,
        verifier_id: str,
        sub_verifier_infos: Sequence[SubVerifierInfo | Mapping[str, Any]],
    ) -> Any:
        """Resolve a single-id aggregate key. Returns the backend payload unmodified."""
        return await self._run(
            "getAggregateTorusKey",
            {
                "verifier": verifier,
                "verifierId": verifier_id,
                "subVerifierInfoArray": sub_verifier_infos,
            },
        )

    # -- method-name dispatch -----------------------------------------------

    async def dispatch(self, method: str, params: Any = None) -> Any:
        """Route a method name and raw argument mapping to an operation.

        Raises:
            MethodNotImplementedError: For an unknown method name.
            InvalidArgumentError: If ``params`` is not a mapping.
        """
        if method == "reset":
            self.reset()
            return None
        if method == "init":
            self.store.initialize_from(InitParams.from_dict(params))
            return None
        if method not in _OPERATIONS:
            raise MethodNotImplementedError(method)
        return await self._run(method, params)

    # -- internals ----------------------------------------------------------

    async def _run(self, method: str, params: Any) -> Any:
        parse, operation = _OPERATIONS[method]
        with self._tracked(method, params):
            # Not-initialized is reported ahead of any argument error
            args = self.store.require()
            request = parse(ensure_mapping(params))
            return await operation(self, args, request)

    @contextmanager
    def _tracked(self, operation: str, params: Any):
        with call_context(operation):
            call_logger.started(operation, params if isinstance(params, Mapping) else None)
            start = time.monotonic()
            try:
                yield
            except Exception as e:
                code = e.code if isinstance(e, CustomAuthException) else type(e).__name__
                call_logger.finished(operation, (time.monotonic() - start) * 1000, code)
                raise
            call_logger.finished(operation, (time.monotonic() - start) * 1000)

    async def _resolve(self, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        try:
            return await call()
        except Exception as e:
            logger.warning(f"{operation} failed in key resolution backend: {e}")
            raise BackendError(str(e), operation=operation) from e

    async def _trigger_login(self, args: AuthArgs, params: TriggerLoginParams) -> Any:
        descriptor = VerifierDetailBuilder(args).build(params.to_sub_verifier())
        request = build_request(AggregationStrategy.SINGLE_LOGIN, params.verifier, [descriptor])
        return await self._resolve(
            "triggerLogin",
            lambda: self.client.resolve_by_login(request, args.network_config),
        )

    async def _trigger_aggregate_login(self, args: AuthArgs, params: AggregateLoginParams) -> Any:
        builder = VerifierDetailBuilder(args)
        descriptors = [builder.build(entry) for entry in params.sub_verifier_details]
        strategy, verifier_type = resolve_verifier_type(params.aggregate_verifier_type)
        # All descriptors are accumulated first; the backend sees one request
        request = build_request(
            strategy,
            params.verifier_identifier,
            descriptors,
            field="subVerifierDetailsArray",
            verifier_type=verifier_type,
        )
        return await self._resolve(
            "triggerAggregateLogin",
            lambda: self.client.resolve_by_login(request, args.network_config),
        )

    async def _get_torus_key(self, args: AuthArgs, params: TorusKeyParams) -> dict[str, str]:
        payload = await self._resolve(
            "getTorusKey",
            lambda: self.client.resolve_by_token(
                params.verifier,
                params.verifier_id,
                params.id_token,
                dict(params.verifier_params),
                args.network_config,
            ),
        )
        return KeyResult.from_payload(payload, operation="getTorusKey").to_minimal()

    async def _get_aggregate_torus_key(
        self, args: AuthArgs, params: AggregateTorusKeyParams
    ) -> Any:
        count = len(params.sub_verifier_infos)
        if count != 1:
            raise ArityError(
                "subVerifierInfoArray must have length of 1",
                field="subVerifierInfoArray",
                count=count,
            )
        info = params.sub_verifier_infos[0]
        descriptor = VerifierDetailBuilder(args).build_jwt(info.verifier or params.verifier)
        request = build_request(
            AggregationStrategy.SINGLE_ID_VERIFIER, params.verifier, [descriptor]
        )
        return await self._resolve(
            "getAggregateTorusKey",
            lambda: self.client.resolve_by_aggregate_token(
                params.verifier,
                params.verifier_id,
                info.id_token,
                request.primary,
                args.network_config,
            ),
        )


_OPERATIONS: dict[str, tuple[Callable[[Any], Any], Callable[..., Awaitable[Any]]]] = {
    "triggerLogin": (TriggerLoginParams.from_dict, LoginOrchestrator._trigger_login),
    "triggerAggregateLogin": (
        AggregateLoginParams.from_dict,
        LoginOrchestrator._trigger_aggregate_login,
    ),
    "getTorusKey": (TorusKeyParams.from_dict, LoginOrchestrator._get_torus_key),
    "getAggregateTorusKey": (
        AggregateTorusKeyParams.from_dict,
        LoginOrchestrator._get_aggregate_torus_key,
    ),
}
