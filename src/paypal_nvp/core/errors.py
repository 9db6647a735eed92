"""
Exception hierarchy shared by the request builder, the transports and the
PayPal client.

Every error raised by the library derives from :class:`PayPalError`, so
callers that only care about "the payment call failed" can catch that single
type.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover
    from .nvp import NVPResponse

__all__ = [
    "DecodeError",
    "HeaderIndexError",
    "InvalidArgumentError",
    "MalformedURIError",
    "MissingHostError",
    "PayPalError",
    "PaymentRejectedError",
    "ProxyConnectionError",
    "ProxyTimeoutError",
    "RequestError",
    "UpstreamError",
]


class PayPalError(Exception):
    """Base class for everything that can go wrong while talking to PayPal."""


class RequestError(PayPalError):
    """Raised when an HTTP request cannot be assembled."""


class InvalidArgumentError(RequestError, ValueError):
    """Raised when a request field is set to an unsupported value."""


class HeaderIndexError(InvalidArgumentError, IndexError):
    """Raised when a header handle does not refer to a live header."""


class MissingHostError(RequestError):
    """Raised when a request is serialized before a host was set."""


class MalformedURIError(PayPalError):
    """Raised when the configured server URI cannot be used."""


class ProxyConnectionError(PayPalError):
    """
    Raised when the connection to the API server cannot be established or
    breaks while the request is in flight.
    """

    def __init__(
        self,
        message: str,
        *,
        errno: Optional[int] = None,
        strerror: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.errno = errno
        self.strerror = strerror


class ProxyTimeoutError(ProxyConnectionError):
    """Raised when connecting or reading exceeds the configured timeout."""


class UpstreamError(PayPalError):
    """Raised when the server answers with a non-success status line."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        reason: str = "",
        body: bytes = b"",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.body = body


class DecodeError(PayPalError):
    """Raised when an API response lacks the fields every reply must carry."""


class PaymentRejectedError(PayPalError):
    """Raised when PayPal answers a call with a failure acknowledgement."""

    def __init__(self, message: str, response: "NVPResponse") -> None:
        super().__init__(message)
        self.response = response
