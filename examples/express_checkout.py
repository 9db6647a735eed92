"""
Minimal script that walks through Express Checkout using the public API.

Run it once with ``start`` to obtain the redirect URL, approve the payment in
the browser, then run it again with ``validate --token <token>``.
"""

from __future__ import annotations

import argparse
import logging
import sys

from paypal_nvp import ConfigError, PayPalError, create_paypal_client, load_paypal_config


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Express Checkout using the paypal_nvp API")
    parser.add_argument("--env-file", default=".env", help="Path to the .env file with PAYPAL_* settings")
    parser.add_argument("--log-level", default="INFO", help="Python logging level (default: INFO)")
    parser.add_argument("--transport", choices=("socket", "requests"), help="Override PAYPAL_TRANSPORT")
    parser.add_argument("--live", action="store_true", help="Use the live endpoints instead of the sandbox")

    commands = parser.add_subparsers(dest="command", required=True)
    start = commands.add_parser("start")
    start.add_argument("--amount", default="10.00")
    start.add_argument("--currency", default="USD")
    start.add_argument("--return-url", default="https://example.com/paypal/return")
    start.add_argument("--cancel-url", default="https://example.com/paypal/cancel")

    validate = commands.add_parser("validate")
    validate.add_argument("--token", required=True)
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        config = load_paypal_config(
            env_file=args.env_file,
            transport=args.transport,
            sandbox=False if args.live else None,
        )
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    client = create_paypal_client(config=config)
    logging.info("Using %s against %s", type(client.proxy).__name__, config.server_uri)

    try:
        if args.command == "start":
            redirect = client.start_payment(
                args.amount, args.currency, args.return_url, args.cancel_url, "Sale"
            )
            logging.info("Send the buyer to %s", redirect.url)
        else:
            details = client.get_checkout_details(args.token)
            if not details.is_success:
                logging.error("Token rejected: %s", details.describe_errors())
                return 1
            logging.info(
                "Checkout %s is valid (payer %s, status %s)",
                args.token,
                details.raw.get("PAYERID"),
                details.raw.get("CHECKOUTSTATUS"),
            )
    except PayPalError as exc:
        logging.error("PayPal call failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
