"""
Core primitives: HTTP request building, transports, NVP codec and the client.
"""

from .client import CheckoutRedirect, PayPalClient, token_from_request
from .config import (
    ConfigError,
    PayPalConfig,
    PayPalParameters,
    load_paypal_config,
)
from .environment import PayPalEnvironment, build_environment, load_env_file
from .errors import (
    DecodeError,
    HeaderIndexError,
    InvalidArgumentError,
    MalformedURIError,
    MissingHostError,
    PayPalError,
    PaymentRejectedError,
    ProxyConnectionError,
    ProxyTimeoutError,
    RequestError,
    UpstreamError,
)
from .nvp import NVPError, NVPResponse, decode_nvp, encode_nvp
from .proxy import ProxyCapability, RequestsProxy, SocketProxy, build_proxy, select_proxy
from .request_builder import HeaderHandle, RequestBuilder
from .response import RawResponse, StatusLine, read_response

__all__ = [
    "CheckoutRedirect",
    "ConfigError",
    "DecodeError",
    "HeaderHandle",
    "HeaderIndexError",
    "InvalidArgumentError",
    "MalformedURIError",
    "MissingHostError",
    "NVPError",
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
    "RawResponse",
    "RequestBuilder",
    "RequestError",
    "RequestsProxy",
    "SocketProxy",
    "StatusLine",
    "UpstreamError",
    "build_environment",
    "build_proxy",
    "decode_nvp",
    "encode_nvp",
    "load_env_file",
    "load_paypal_config",
    "read_response",
    "select_proxy",
    "token_from_request",
]
