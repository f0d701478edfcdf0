# SPDX-License-Identifier: MIT
# Copyright (c) 2026 CustomAuth Contributors

"""Build canonical sub-verifier descriptors from per-call parameters."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from customauth.auth.config_store import AuthArgs
from customauth.auth.models import (
    PLACEHOLDER_CLIENT_ID,
    LoginProvider,
    LoginType,
    SubVerifierDescriptor,
)
from customauth.auth.requests import SubVerifierParams
from customauth.core.exceptions import InvalidProviderError, MissingFieldError


def parse_provider(type_of_login: str) -> LoginProvider:
    """Map ``typeOfLogin`` to a provider.

    Raises:
        InvalidProviderError: For anything that is not an exact provider value.
    """
    try:
        return LoginProvider(type_of_login)
    except ValueError:
        raise InvalidProviderError(type_of_login) from None


class VerifierDetailBuilder:
    """Builds descriptors bound to one session snapshot.

    Redirect URLs are always taken from ``args``, so every flow in a
    session redirects the same way.
    """

    def __init__(self, args: AuthArgs) -> None:
        self.args = args

    def build(self, params: SubVerifierParams | Mapping[str, Any]) -> SubVerifierDescriptor:
        """Build one descriptor.

        ``params`` may be a raw mapping (``typeOfLogin``, ``verifier``,
        ``clientId``, optional ``jwtParams``) or an already parsed
        :class:`SubVerifierParams`.

        Raises:
            MissingFieldError: If a required field is absent. ``clientId`` may
                be omitted only for token-only providers.
            InvalidProviderError: If ``typeOfLogin`` is not recognized.
        """
        if not isinstance(params, SubVerifierParams):
            params = SubVerifierParams.from_dict(params)

        provider = parse_provider(params.type_of_login)
        client_id = params.client_id
        if client_id is None:
            if not provider.is_token_only:
                raise MissingFieldError("Missing required field: clientId", field="clientId")
            client_id = PLACEHOLDER_CLIENT_ID

        return SubVerifierDescriptor(
            login_type=LoginType.WEB,
            login_provider=provider,
            client_id=client_id,
            verifier=params.verifier,
            redirect_url=self.args.redirect_uri,
            browser_redirect_url=self.args.browser_redirect_uri,
            jwt_params=dict(params.jwt_params),
        )

    def build_jwt(self, verifier: str) -> SubVerifierDescriptor:
        """Descriptor for pre-issued ID token flows."""
        return self.build(
            SubVerifierParams(
                type_of_login=LoginProvider.JWT.value,
                verifier=verifier,
                client_id=PLACEHOLDER_CLIENT_ID,
            )
        )
