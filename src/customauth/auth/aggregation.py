# SPDX-License-Identifier: MIT
# Copyright (c) 2026 CustomAuth Contributors

"""Aggregation policy: strategy names and the arity each strategy allows.

Pure functions; nothing here touches the network. :func:`build_request` is
the single place an :class:`AggregationRequest` is assembled, so a
malformed request can never reach the backend.
"""

from __future__ import annotations

from collections.abc import Sequence

from customauth.auth.models import (
    AggregationRequest,
    AggregationStrategy,
    SubVerifierDescriptor,
)
from customauth.core.exceptions import ArityError, InvalidStrategyError

# Alternate spellings accepted for strategy names
STRATEGY_ALIASES: dict[str, AggregationStrategy] = {
    "singleLogin": AggregationStrategy.SINGLE_LOGIN,
    "singleIdVerifier": AggregationStrategy.SINGLE_ID_VERIFIER,
    "aggregateVerifier": AggregationStrategy.AGGREGATE_VERIFIER,
    "and_aggregate_verifier": AggregationStrategy.AGGREGATE_VERIFIER,
    "or_aggregate_verifier": AggregationStrategy.AGGREGATE_VERIFIER,
}

# Names the backend distinguishes although they share an arity rule
DISTINCT_WIRE_TYPES = frozenset({"and_aggregate_verifier", "or_aggregate_verifier"})


def resolve_strategy(name: str) -> AggregationStrategy:
    """Map a strategy identifier to an :class:`AggregationStrategy`.

    Raises:
        InvalidStrategyError: On an unrecognized name.
    """
    if isinstance(name, AggregationStrategy):
        return name
    try:
        return AggregationStrategy(name)
    except ValueError:
        pass
    strategy = STRATEGY_ALIASES.get(name)
    if strategy is None:
        raise InvalidStrategyError(name)
    return strategy


def resolve_verifier_type(name: str) -> tuple[AggregationStrategy, str]:
    """Resolve ``name`` to its strategy and the verifier type sent to the backend.

    ``and_aggregate_verifier`` and ``or_aggregate_verifier`` keep their own
    name on the wire. Every other accepted spelling is sent as the
    canonical strategy value.
    """
    strategy = resolve_strategy(name)
    if name in DISTINCT_WIRE_TYPES:
        return strategy, name
    return strategy, strategy.value


def validate_arity(strategy: AggregationStrategy, count: int, field: str | None = None) -> None:
    """Check the number of sub-verifiers against the strategy.

    Exactly one for single login and single-id verifier, at least one for
    the generic aggregate verifier.

    Raises:
        ArityError: On mismatch. Requests are never truncated or padded.
    """
    if strategy.requires_single:
        if count != 1:
            raise ArityError(
                f"{strategy.value} requires exactly one sub-verifier, got {count}",
                field=field,
                count=count,
            )
    elif count < 1:
        raise ArityError(
            f"{strategy.value} requires at least one sub-verifier", field=field, count=count
        )


def build_request(
    strategy: AggregationStrategy,
    aggregate_verifier: str,
    sub_verifiers: Sequence[SubVerifierDescriptor],
    field: str | None = None,
    verifier_type: str | None = None,
) -> AggregationRequest:
    """Validate arity and assemble the request, preserving order."""
    validate_arity(strategy, len(sub_verifiers), field=field)
    return AggregationRequest(
        strategy=strategy,
        aggregate_verifier=aggregate_verifier,
        sub_verifiers=tuple(sub_verifiers),
        verifier_type=verifier_type,
    )
