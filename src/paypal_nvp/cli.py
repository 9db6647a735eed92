"""
Command-line interface for exercising the Express Checkout calls.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Optional, Sequence, Tuple

from .api import ConfigError, create_paypal_client, load_paypal_config
from .core.client import PayPalClient
from .core.errors import PayPalError


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _env_override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="paypal-nvp",
        description="Run a PayPal Express Checkout call over the NVP API",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing PAYPAL_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    start = commands.add_parser("start", help="Create a checkout session and print the redirect URL")
    start.add_argument("--amount", required=True, help="Order total, e.g. 19.99")
    start.add_argument("--currency", default="USD", help="ISO currency code (default: USD)")
    start.add_argument("--return-url", required=True, help="Where PayPal sends the buyer after approval")
    start.add_argument("--cancel-url", required=True, help="Where PayPal sends the buyer on cancel")
    start.add_argument(
        "--payment-action",
        default="",
        help="PAYMENTACTION value such as Sale or Authorization (default: omitted)",
    )

    validate = commands.add_parser("validate", help="Validate a checkout token returned by PayPal")
    validate.add_argument("--token", required=True, help="The token query parameter from the return URL")
    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = _collect_overrides(args.set or ())

    try:
        config = load_paypal_config(env_file=args.env_file, overrides=overrides)
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    client = create_paypal_client(config=config)

    if args.command == "start":
        return _handle_start(client, args)
    return _handle_validate(client, args.token)


def _handle_start(client: PayPalClient, args: argparse.Namespace) -> int:
    try:
        redirect = client.start_payment(
            args.amount,
            args.currency,
            args.return_url,
            args.cancel_url,
            args.payment_action,
        )
    except PayPalError as exc:
        logging.error("Cannot start payment: %s", exc)
        return 1

    logging.info("Redirect the buyer to complete checkout %s", redirect.token)
    print(redirect.url)
    return 0


def _handle_validate(client: PayPalClient, token: str) -> int:
    try:
        client.validate_payment(token)
    except PayPalError as exc:
        logging.error("Payment validation failed: %s", exc)
        return 1

    print("valid")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    sys.exit(run_cli(argv))
