"""Verifier orchestration and key resolution.

Key concepts:
- **ConfigStore**: the session configuration supplied by ``init``.
- **VerifierDetailBuilder**: turns per-call parameters into canonical
  sub-verifier descriptors, always using the session's redirect URLs.
- **Aggregation policy**: strategy names and the sub-verifier counts each allows.
- **KeyResolutionClient**: the key management network collaborator.
- **LoginOrchestrator**: validates, builds, and makes exactly one backend call
  per operation.
"""

from customauth.auth.aggregation import (
    build_request,
    resolve_strategy,
    resolve_verifier_type,
    validate_arity,
)
from customauth.auth.client import (
    HttpKeyResolutionClient,
    KeyResolutionClient,
    KeyResolutionClientError,
)
from customauth.auth.config_store import AuthArgs, ConfigStore
from customauth.auth.models import (
    AggregationRequest,
    AggregationStrategy,
    KeyResult,
    LoginProvider,
    Network,
    NetworkConfig,
    SubVerifierDescriptor,
)
from customauth.auth.orchestrator import LoginOrchestrator
from customauth.auth.verifier_details import VerifierDetailBuilder

__all__ = [
    "AggregationRequest",
    "AggregationStrategy",
    "AuthArgs",
    "ConfigStore",
    "HttpKeyResolutionClient",
    "KeyResolutionClient",
    "KeyResolutionClientError",
    "KeyResult",
    "LoginOrchestrator",
    "LoginProvider",
    "Network",
    "NetworkConfig",
    "SubVerifierDescriptor",
    "VerifierDetailBuilder",
    "build_request",
    "resolve_strategy",
    "resolve_verifier_type",
    "validate_arity",
]
