# SPDX-License-Identifier: MIT
# Copyright (c) 2026 CustomAuth Contributors

"""Typed request descriptors, one per orchestration operation.

Raw parameter mappings are read only here. Each ``from_dict`` either returns
a fully typed object or raises a :class:`~customauth.core.exceptions.ValidationError`
subclass, so the orchestrator never casts or unwraps optional values.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from customauth.core.exceptions import (
    InvalidArgumentError,
    MissingConfigError,
    MissingFieldError,
)

# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def ensure_mapping(params: Any, name: str = "params") -> Mapping[str, Any]:
    """Reject anything that is not a mapping."""
    if not isinstance(params, Mapping):
        raise InvalidArgumentError("Invalid method arguments", field=name)
    return params


def _require_str(params: Mapping[str, Any], name: str, missing: type = MissingFieldError) -> str:
    value = params.get(name)
    if value is None:
        raise missing(f"Missing required field: {name}", field=name)
    if not isinstance(value, str):
        raise InvalidArgumentError(f"Field {name} must be a string", field=name, value=value)
    return value


def _optional_str(params: Mapping[str, Any], name: str) -> str | None:
    value = params.get(name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidArgumentError(f"Field {name} must be a string", field=name, value=value)
    return value


def _str_map(value: Any, name: str) -> dict[str, str]:
    if not isinstance(value, Mapping) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    ):
        raise InvalidArgumentError(f"Field {name} must map strings to strings", field=name)
    return dict(value)


def _optional_str_map(params: Mapping[str, Any], name: str) -> dict[str, str]:
    value = params.get(name)
    if value is None:
        return {}
    return _str_map(value, name)


def _require_list(params: Mapping[str, Any], name: str) -> list[Any]:
    value = params.get(name)
    if value is None:
        raise MissingFieldError(f"Missing required field: {name}", field=name)
    if not isinstance(value, (list, tuple)):
        raise InvalidArgumentError(f"Field {name} must be a list", field=name)
    return list(value)


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InitParams:
    """Arguments of ``init``. ``network`` is kept raw; the store maps it."""

    network: str
    browser_redirect_uri: str
    redirect_uri: str
    enable_one_key: bool
    network_url: str | None = None

    @classmethod
    def from_dict(cls, params: Any) -> InitParams:
        params = ensure_mapping(params)
        network = _require_str(params, "network", MissingConfigError)
        browser_redirect_uri = _require_str(params, "browserRedirectUri", MissingConfigError)
        redirect_uri = _require_str(params, "redirectUri", MissingConfigError)
        enable_one_key = params.get("enableOneKey")
        if enable_one_key is None:
            raise MissingConfigError("Missing required field: enableOneKey", field="enableOneKey")
        if not isinstance(enable_one_key, bool):
            raise InvalidArgumentError(
                "Field enableOneKey must be a boolean", field="enableOneKey", value=enable_one_key
            )
        return cls(
            network=network,
            browser_redirect_uri=browser_redirect_uri,
            redirect_uri=redirect_uri,
            enable_one_key=enable_one_key,
            network_url=_optional_str(params, "networkUrl") or None,
        )


# ---------------------------------------------------------------------------
# triggerLogin / triggerAggregateLogin
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SubVerifierParams:
    """Raw-but-typed inputs for one sub-verifier.

    ``type_of_login`` is validated against the provider enum by the
    descriptor builder, not here. ``client_id`` may be None only for
    token-only providers.
    """

    type_of_login: str
    verifier: str
    client_id: str | None = None
    jwt_params: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, params: Any) -> SubVerifierParams:
        if isinstance(params, cls):
            return params
        params = ensure_mapping(params, "subVerifierDetailsArray")
        return cls(
            type_of_login=_require_str(params, "typeOfLogin"),
            verifier=_require_str(params, "verifier"),
            client_id=_optional_str(params, "clientId"),
            jwt_params=_optional_str_map(params, "jwtParams"),
        )


@dataclass(frozen=True)
class TriggerLoginParams:
    type_of_login: str
    verifier: str
    client_id: str
    jwt_params: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, params: Any) -> TriggerLoginParams:
        params = ensure_mapping(params)
        return cls(
            type_of_login=_require_str(params, "typeOfLogin"),
            verifier=_require_str(params, "verifier"),
            client_id=_require_str(params, "clientId"),
            jwt_params=_optional_str_map(params, "jwtParams"),
        )

    def to_sub_verifier(self) -> SubVerifierParams:
        return SubVerifierParams(
            type_of_login=self.type_of_login,
            verifier=self.verifier,
            client_id=self.client_id,
            jwt_params=self.jwt_params,
        )


@dataclass(frozen=True)
class AggregateLoginParams:
    aggregate_verifier_type: str
    verifier_identifier: str
    sub_verifier_details: tuple[SubVerifierParams, ...]

    @classmethod
    def from_dict(cls, params: Any) -> AggregateLoginParams:
        params = ensure_mapping(params)
        aggregate_verifier_type = _require_str(params, "aggregateVerifierType")
        verifier_identifier = _require_str(params, "verifierIdentifier")
        entries = _require_list(params, "subVerifierDetailsArray")
        return cls(
            aggregate_verifier_type=aggregate_verifier_type,
            verifier_identifier=verifier_identifier,
            sub_verifier_details=tuple(SubVerifierParams.from_dict(e) for e in entries),
        )


# ---------------------------------------------------------------------------
# getTorusKey / getAggregateTorusKey
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TorusKeyParams:
    verifier: str
    verifier_id: str
    id_token: str = field(repr=False)
    verifier_params: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, params: Any) -> TorusKeyParams:
        params = ensure_mapping(params)
        verifier = _require_str(params, "verifier")
        verifier_id = _require_str(params, "verifierId")
        id_token = _require_str(params, "idToken")
        verifier_params = params.get("verifierParams")
        if verifier_params is None:
            raise MissingFieldError(
                "Missing required field: verifierParams", field="verifierParams"
            )
        return cls(
            verifier=verifier,
            verifier_id=verifier_id,
            id_token=id_token,
            verifier_params=_str_map(verifier_params, "verifierParams"),
        )


@dataclass(frozen=True)
class SubVerifierInfo:
    """One ``{verifier, idToken}`` entry. An empty verifier is allowed."""

    verifier: str
    id_token: str = field(repr=False)

    @classmethod
    def from_dict(cls, params: Any) -> SubVerifierInfo:
        if isinstance(params, cls):
            return params
        params = ensure_mapping(params, "subVerifierInfoArray")
        return cls(
            verifier=_require_str(params, "verifier"),
            id_token=_require_str(params, "idToken"),
        )


@dataclass(frozen=True)
class AggregateTorusKeyParams:
    verifier: str
    verifier_id: str
    sub_verifier_infos: tuple[SubVerifierInfo, ...]

    @classmethod
    def from_dict(cls, params: Any) -> AggregateTorusKeyParams:
        params = ensure_mapping(params)
        verifier = _require_str(params, "verifier")
        verifier_id = _require_str(params, "verifierId")
        entries = _require_list(params, "subVerifierInfoArray")
        return cls(
            verifier=verifier,
            verifier_id=verifier_id,
            sub_verifier_infos=tuple(SubVerifierInfo.from_dict(e) for e in entries),
        )
