# SPDX-License-Identifier: MIT
# Copyright (c) 2026 CustomAuth Contributors

"""Session configuration supplied by ``init``.

:class:`AuthArgs` is an immutable snapshot; :class:`ConfigStore` holds the
current one. Operations take a snapshot once via :meth:`ConfigStore.require`
and use it for the whole call.

The store has no internal locking. Serializing ``initialize``/``reset``
against in-flight calls is the caller's responsibility.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from customauth.auth.models import Network, NetworkConfig
from customauth.auth.requests import InitParams
from customauth.core.exceptions import NotInitializedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthArgs:
    """Validated session configuration."""

    network: Network
    browser_redirect_uri: str
    redirect_uri: str
    enable_one_key: bool = False
    network_url: str | None = None

    @classmethod
    def from_params(cls, params: InitParams) -> AuthArgs:
        return cls(
            network=Network.parse(params.network),
            browser_redirect_uri=params.browser_redirect_uri,
            redirect_uri=params.redirect_uri,
            enable_one_key=params.enable_one_key,
            network_url=params.network_url or None,
        )

    @property
    def network_config(self) -> NetworkConfig:
        return NetworkConfig(
            network=self.network,
            enable_one_key=self.enable_one_key,
            network_url=self.network_url,
        )


class ConfigStore:
    """Holder of the current :class:`AuthArgs`."""

    def __init__(self, args: AuthArgs | None = None) -> None:
        self._args = args

    @property
    def is_initialized(self) -> bool:
        return self._args is not None

    def initialize(
        self,
        network: str,
        browser_redirect_uri: str,
        redirect_uri: str,
        enable_one_key: bool,
        network_url: str | None = None,
    ) -> AuthArgs:
        """Replace any prior configuration.

        Unknown network names fall back to mainnet. An empty ``network_url``
        is treated as unset.

        Raises:
            MissingConfigError: If a required argument is None.
        """
        params = InitParams.from_dict(
            {
                "network": network,
                "browserRedirectUri": browser_redirect_uri,
                "redirectUri": redirect_uri,
                "enableOneKey": enable_one_key,
                "networkUrl": network_url,
            }
        )
        return self.initialize_from(params)

    def initialize_from(self, params: InitParams) -> AuthArgs:
        args = AuthArgs.from_params(params)
        self._args = args
        logger.info(
            f"Initialized: network={args.network.value}, "
            f"browserRedirectUri={args.browser_redirect_uri}, redirectUri={args.redirect_uri}, "
            f"enableOneKey={args.enable_one_key}"
        )
        return args

    def require(self) -> AuthArgs:
        """Return the current snapshot.

        Raises:
            NotInitializedError: If ``initialize`` has not been called.
        """
        if self._args is None:
            raise NotInitializedError()
        return self._args

    def reset(self) -> None:
        if self._args is not None:
            logger.info("Configuration cleared")
        self._args = None
