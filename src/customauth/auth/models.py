# SPDX-License-Identifier: MIT
# Copyright (c) 2026 CustomAuth Contributors

"""Data models for verifier orchestration.

- :class:`Network` - which key management network a session targets.
- :class:`LoginProvider` - the identity provider behind one sub-verifier.
- :class:`AggregationStrategy` - how sub-verifiers combine into one key.
- :class:`SubVerifierDescriptor` - one canonical sub-verifier, built per call.
- :class:`AggregationRequest` - strategy + ordered descriptors for one login.
- :class:`KeyResult` - the key pair returned by the backend.

Descriptors and requests are call-scoped; nothing here is persisted.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any

from customauth.core.exceptions import BackendError

logger = logging.getLogger(__name__)

# Client id used for token-only flows where no OAuth client is involved
PLACEHOLDER_CLIENT_ID = "<empty>"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Network(enum.StrEnum):
    """Key management network selection."""

    MAINNET = "mainnet"
    TESTNET = "testnet"
    CYAN = "cyan"
    AQUA = "aqua"
    CELESTE = "celeste"

    @classmethod
    def parse(cls, value: str) -> Network:
        """Map a network name to a member, falling back to MAINNET."""
        try:
            return cls(value)
        except ValueError:
            logger.warning(f"Unknown network {value!r}, falling back to {cls.MAINNET.value}")
            return cls.MAINNET


class LoginType(enum.StrEnum):
    """How the login is carried out. Only web logins are supported."""

    WEB = "web"


class LoginProvider(enum.StrEnum):
    """Identity providers a sub-verifier can use."""

    GOOGLE = "google"
    FACEBOOK = "facebook"
    TWITCH = "twitch"
    REDDIT = "reddit"
    DISCORD = "discord"
    APPLE = "apple"
    GITHUB = "github"
    LINKEDIN = "linkedin"
    KAKAO = "kakao"
    TWITTER = "twitter"
    WEIBO = "weibo"
    LINE = "line"
    WECHAT = "wechat"
    EMAIL_PASSWORD = "email_password"
    JWT = "jwt"

    @property
    def is_token_only(self) -> bool:
        """True for providers that never run an OAuth client flow."""
        return self is LoginProvider.JWT


class AggregationStrategy(enum.StrEnum):
    """How sub-verifier results combine into one derived key."""

    SINGLE_LOGIN = "single_login"
    SINGLE_ID_VERIFIER = "single_id_verifier"
    AGGREGATE_VERIFIER = "aggregate_verifier"

    @property
    def requires_single(self) -> bool:
        return self in (AggregationStrategy.SINGLE_LOGIN, AggregationStrategy.SINGLE_ID_VERIFIER)


# ---------------------------------------------------------------------------
# Network configuration passed alongside login requests
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NetworkConfig:
    """The network half of a session's configuration."""

    network: Network
    enable_one_key: bool = False
    network_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "network": self.network.value,
            "enableOneKey": self.enable_one_key,
            "networkUrl": self.network_url,
        }


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SubVerifierDescriptor:
    """One canonical sub-verifier.

    Redirect URLs always come from the session configuration, never from
    per-call input.

    Attributes:
        login_provider: Recognized identity provider.
        client_id: OAuth client id, or the placeholder for token flows.
        verifier: Name of the verifier registered with the backend.
        redirect_url: App redirect URI from the session.
        browser_redirect_url: Browser redirect URI from the session.
        jwt_params: Extra provider parameters (e.g. ``domain``).
        login_type: Always ``web``.
    """

    login_provider: LoginProvider
    client_id: str
    verifier: str
    redirect_url: str
    browser_redirect_url: str
    jwt_params: dict[str, str] = field(default_factory=dict)
    login_type: LoginType = LoginType.WEB

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the backend's camelCase keys."""
        return {
            "loginType": self.login_type.value,
            "loginProvider": self.login_provider.value,
            "clientId": self.client_id,
            "verifier": self.verifier,
            "redirectURL": self.redirect_url,
            "browserRedirectURL": self.browser_redirect_url,
            "jwtParams": dict(self.jwt_params),
        }


@dataclass(frozen=True)
class AggregationRequest:
    """A validated login request: strategy plus ordered sub-verifiers.

    Order is significant; the first descriptor is the primary one for
    strategies that distinguish. ``verifier_type`` is the name sent to the
    backend when it is finer than ``strategy``: ``and_aggregate_verifier``
    and ``or_aggregate_verifier`` both validate as ``aggregate_verifier``.
    """

    strategy: AggregationStrategy
    aggregate_verifier: str
    sub_verifiers: tuple[SubVerifierDescriptor, ...]
    verifier_type: str | None = None

    @property
    def primary(self) -> SubVerifierDescriptor:
        return self.sub_verifiers[0]

    def to_dict(self) -> dict[str, Any]:
        return {
            "aggregateVerifierType": self.verifier_type or self.strategy.value,
            "aggregateVerifier": self.aggregate_verifier,
            "subVerifierDetails": [d.to_dict() for d in self.sub_verifiers],
        }


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass
class KeyResult:
    """Key pair resolved by the backend.

    ``extra`` holds any additional backend fields verbatim.
    """

    public_address: str
    private_key: str
    extra: dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        # Never echo key material
        return f"KeyResult(public_address={self.public_address!r}, private_key='[REDACTED]')"

    @classmethod
    def from_payload(cls, payload: Any, operation: str | None = None) -> KeyResult:
        """Build from a backend payload.

        Raises:
            BackendError: If the payload is not a mapping or lacks either key field.
        """
        if not isinstance(payload, dict):
            raise BackendError(
                f"unexpected key payload type {type(payload).__name__}", operation=operation
            )
        missing = [k for k in ("publicAddress", "privateKey") if payload.get(k) is None]
        if missing:
            raise BackendError(f"key payload missing {', '.join(missing)}", operation=operation)
        extra = {k: v for k, v in payload.items() if k not in ("publicAddress", "privateKey")}
        return cls(
            public_address=payload["publicAddress"],
            private_key=payload["privateKey"],
            extra=extra,
        )

    def to_minimal(self) -> dict[str, str]:
        """Exactly ``publicAddress`` and ``privateKey``."""
        return {"publicAddress": self.public_address, "privateKey": self.private_key}
