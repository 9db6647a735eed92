"""
Public facade for the PayPal NVP client package.

The most useful pieces are re-exported here so integrators can
``from paypal_nvp import ...`` without navigating the package.
"""

from .api import create_paypal_client, start_payment, validate_payment
from .core import (
    CheckoutRedirect,
    ConfigError,
    DecodeError,
    HeaderIndexError,
    InvalidArgumentError,
    MalformedURIError,
    MissingHostError,
    NVPResponse,
    PayPalClient,
    PayPalConfig,
    PayPalEnvironment,
    PayPalError,
    PayPalParameters,
    PaymentRejectedError,
    ProxyCapability,
    ProxyConnectionError,
    ProxyTimeoutError,
    RequestBuilder,
    RequestsProxy,
    SocketProxy,
    UpstreamError,
    build_environment,
    decode_nvp,
    encode_nvp,
    load_env_file,
    load_paypal_config,
    select_proxy,
    token_from_request,
)

__all__ = (
    "CheckoutRedirect",
    "ConfigError",
    "DecodeError",
    "HeaderIndexError",
    "InvalidArgumentError",
    "MalformedURIError",
    "MissingHostError",
    "NVPResponse",
    "PayPalClient",
    "PayPalConfig",
    "PayPalEnvironment",
    "PayPalError",
    "PayPalParameters",
    "PaymentRejectedError",
    "ProxyCapability",
    "ProxyConnectionError",
    "ProxyTimeoutError",
    "RequestBuilder",
    "RequestsProxy",
    "SocketProxy",
    "UpstreamError",
    "build_environment",
    "create_paypal_client",
    "decode_nvp",
    "encode_nvp",
    "load_env_file",
    "load_paypal_config",
    "select_proxy",
    "start_payment",
    "token_from_request",
    "validate_payment",
)
