"""
Public, high-level helpers for Express Checkout over the NVP API.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional, Union

from .core.client import CheckoutRedirect, PayPalClient, token_from_request
from .core.config import (
    ConfigError,
    PayPalConfig,
    PayPalParameters,
    load_paypal_config,
)
from .core.environment import PayPalEnvironment, build_environment, load_env_file
from .core.proxy import ProxyCapability

__all__ = [
    "CheckoutRedirect",
    "ConfigError",
    "PayPalClient",
    "PayPalConfig",
    "PayPalEnvironment",
    "PayPalParameters",
    "build_environment",
    "create_paypal_client",
    "load_env_file",
    "load_paypal_config",
    "start_payment",
    "token_from_request",
    "validate_payment",
]


def create_paypal_client(
    *,
    config: Optional[PayPalConfig] = None,
    proxy: Optional[ProxyCapability] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[PayPalParameters] = None,
    **fields: Any,
) -> PayPalClient:
    """
    Construct a :class:`PayPalClient`.

    Callers can either supply a ready-made :class:`PayPalConfig` or let the
    helper assemble one from environment data and keyword fields.
    """
    if config is not None:
        extras = (overrides, base, parameters, *fields.values())
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built PayPalConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_paypal_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            parameters=parameters,
            **fields,
        )
    return PayPalClient(cfg, proxy=proxy)


def start_payment(
    amount: Union[Decimal, str, float, int],
    currency: str,
    return_uri: str,
    cancel_uri: str,
    payment_action: str = "",
    **client_options: Any,
) -> CheckoutRedirect:
    """
    One-shot ``SetExpressCheckout``; ``client_options`` go to
    :func:`create_paypal_client`.
    """
    client = create_paypal_client(**client_options)
    return client.start_payment(amount, currency, return_uri, cancel_uri, payment_action)


def validate_payment(token: str, **client_options: Any) -> bool:
    client = create_paypal_client(**client_options)
    return client.validate_payment(token)
