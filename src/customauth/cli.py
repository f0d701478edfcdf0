#!/usr/bin/env python3
"""
CustomAuth CLI - resolve keys from pre-issued ID tokens.

Commands:
  customauth get-key              Resolve a key for one verifier
  customauth get-aggregate-key    Resolve a single-id aggregate key

Examples:
  customauth --network testnet get-key --verifier my-verifier \\
      --verifier-id alice@example.com --id-token "$ID_TOKEN"

  customauth get-aggregate-key --verifier my-aggregate \\
      --verifier-id alice@example.com --id-token "$ID_TOKEN" --sub-verifier google-sub
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from customauth.auth.client import HttpKeyResolutionClient
from customauth.auth.orchestrator import LoginOrchestrator
from customauth.core.config import get_config
from customauth.core.exceptions import CustomAuthException
from customauth.core.logging import configure_logging

logger = logging.getLogger(__name__)

DEFAULT_REDIRECT_URI = "customauth://redirect"
DEFAULT_BROWSER_REDIRECT_URI = "https://localhost/serviceworker/redirect"


def _parse_params(pairs: list[str] | None) -> dict[str, str]:
    params: dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"expected key=value, got {pair!r}")
        params[key] = value
    return params


def build_orchestrator(args: argparse.Namespace) -> LoginOrchestrator:
    """Create an orchestrator initialized from the global options."""
    client = HttpKeyResolutionClient(base_url=args.resolver_url)
    orchestrator = LoginOrchestrator(client)
    orchestrator.init(
        network=args.network or get_config().default_network,
        browser_redirect_uri=args.browser_redirect_uri,
        redirect_uri=args.redirect_uri,
        enable_one_key=args.enable_one_key,
        network_url=args.network_url,
    )
    return orchestrator


async def cmd_get_key(args: argparse.Namespace) -> Any:
    orchestrator = build_orchestrator(args)
    return await orchestrator.get_torus_key(
        verifier=args.verifier,
        verifier_id=args.verifier_id,
        id_token=args.id_token,
        verifier_params=_parse_params(args.param),
    )


async def cmd_get_aggregate_key(args: argparse.Namespace) -> Any:
    orchestrator = build_orchestrator(args)
    return await orchestrator.get_aggregate_torus_key(
        verifier=args.verifier,
        verifier_id=args.verifier_id,
        sub_verifier_infos=[{"verifier": args.sub_verifier, "idToken": args.id_token}],
    )


COMMANDS = {
    "get-key": cmd_get_key,
    "get-aggregate-key": cmd_get_aggregate_key,
}


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="customauth",
        description="Resolve threshold keys from verified identities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
  CUSTOMAUTH_RESOLVER_URL       Key resolution gateway (default: http://127.0.0.1:8560)
  CUSTOMAUTH_RESOLVER_TIMEOUT   Request timeout in seconds (default: 30)
  CUSTOMAUTH_DEFAULT_NETWORK    Network when --network is omitted (default: mainnet)
  CUSTOMAUTH_LOG_LEVEL          Log level (default: INFO)
        """,
    )

    parser.add_argument("--network", help="mainnet, testnet, cyan, aqua or celeste")
    parser.add_argument("--redirect-uri", default=DEFAULT_REDIRECT_URI)
    parser.add_argument("--browser-redirect-uri", default=DEFAULT_BROWSER_REDIRECT_URI)
    parser.add_argument("--network-url", help="Custom network endpoint")
    parser.add_argument("--resolver-url", help="Override CUSTOMAUTH_RESOLVER_URL")
    parser.add_argument("--enable-one-key", action="store_true")
    parser.add_argument("--log-level", help="Override CUSTOMAUTH_LOG_LEVEL")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    key_parser = subparsers.add_parser(
        "get-key",
        help="Resolve a key for one verifier",
        description="Resolve publicAddress and privateKey from a pre-issued ID token.",
    )
    key_parser.add_argument("--verifier", required=True)
    key_parser.add_argument("--verifier-id", required=True)
    key_parser.add_argument("--id-token", required=True)
    key_parser.add_argument(
        "--param",
        action="append",
        metavar="KEY=VALUE",
        help="Verifier parameter forwarded as user data (repeatable)",
    )

    agg_parser = subparsers.add_parser(
        "get-aggregate-key",
        help="Resolve a single-id aggregate key",
        description="Resolve a key through a single-id aggregate verifier.",
    )
    agg_parser.add_argument("--verifier", required=True, help="Aggregate verifier name")
    agg_parser.add_argument("--verifier-id", required=True)
    agg_parser.add_argument("--id-token", required=True)
    agg_parser.add_argument(
        "--sub-verifier",
        default="",
        help="Sub-verifier name (defaults to the aggregate verifier)",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging(level=args.log_level, json_format=True if args.json_logs else None)

    try:
        result = asyncio.run(COMMANDS[args.command](args))
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))
    except CustomAuthException as e:
        print(json.dumps(e.to_dict(), indent=2), file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
