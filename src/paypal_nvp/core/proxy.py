"""
Transports that deliver an encoded NVP payload to the API server.

:class:`SocketProxy` speaks HTTP/1.1 over a raw (optionally TLS wrapped)
socket using :class:`~paypal_nvp.core.request_builder.RequestBuilder`.
:class:`RequestsProxy` does the same over a :class:`requests.Session`.
Both satisfy :class:`ProxyCapability`, which is all the client depends on.
"""

from __future__ import annotations

import logging
import socket
import ssl
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Protocol, Sequence, Type, runtime_checkable
from urllib.parse import urlsplit

import requests

from .config import USER_AGENT, ConfigError
from .errors import (
    MalformedURIError,
    ProxyConnectionError,
    ProxyTimeoutError,
    UpstreamError,
)
from .request_builder import RequestBuilder
from .response import DEFAULT_MAX_RESPONSE_BYTES, RawResponse, read_response

if TYPE_CHECKING:  # pragma: no cover
    from .config import PayPalConfig

__all__ = [
    "CONTENT_TYPE",
    "ConnectionFactory",
    "ProxyCapability",
    "RequestsProxy",
    "ServerAddress",
    "SocketProxy",
    "build_proxy",
    "open_connection",
    "parse_server_uri",
    "select_proxy",
]

CONTENT_TYPE = "application/x-www-form-urlencoded;Charset=UTF-8"
DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_READ_TIMEOUT = 30.0


@runtime_checkable
class ProxyCapability(Protocol):
    """Surface every transport offers to :class:`~paypal_nvp.core.client.PayPalClient`."""

    def init(self, server_uri: str) -> None: ...

    def send(self, payload: bytes) -> bytes: ...

    @classmethod
    def is_supported(cls) -> bool: ...


@dataclass(frozen=True)
class ServerAddress:
    scheme: str
    host: str
    port: Optional[int]
    path: str
    query: str

    @property
    def secure(self) -> bool:
        return self.scheme == "https"

    @property
    def connect_port(self) -> int:
        if self.port is not None:
            return self.port
        return 443 if self.secure else 80


def parse_server_uri(server_uri: Optional[str]) -> ServerAddress:
    if not server_uri:
        raise MalformedURIError("No server URI configured; call init() first.")
    try:
        parts = urlsplit(server_uri)
        port = parts.port
    except ValueError as exc:
        raise MalformedURIError(f"Malformed server URI supplied: {server_uri!r}") from exc

    scheme = parts.scheme.lower()
    if scheme not in ("http", "https") or not parts.hostname:
        raise MalformedURIError(f"Malformed server URI supplied: {server_uri!r}")

    return ServerAddress(
        scheme=scheme,
        host=parts.hostname,
        port=port,
        path=parts.path or "/",
        query=parts.query,
    )


ConnectionFactory = Callable[..., socket.socket]


def open_connection(host: str, port: int, *, secure: bool, timeout: Optional[float]) -> socket.socket:
    """Open a TCP connection, wrapped in TLS when ``secure`` is set."""
    sock = socket.create_connection((host, port), timeout=timeout)
    if not secure:
        return sock
    context = ssl.create_default_context()
    try:
        return context.wrap_socket(sock, server_hostname=host)
    except BaseException:
        sock.close()
        raise


class SocketProxy:
    """
    Connection-per-call HTTP/1.1 transport on top of :mod:`socket`.
    """

    def __init__(
        self,
        *,
        user_agent: str = USER_AGENT,
        connect_timeout: Optional[float] = DEFAULT_CONNECT_TIMEOUT,
        read_timeout: Optional[float] = DEFAULT_READ_TIMEOUT,
        max_response_bytes: Optional[int] = DEFAULT_MAX_RESPONSE_BYTES,
        connection_factory: Optional[ConnectionFactory] = None,
    ) -> None:
        self.server_uri: Optional[str] = None
        self.user_agent = user_agent
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self.max_response_bytes = max_response_bytes
        self._connect = connection_factory or open_connection

    def init(self, server_uri: str) -> None:
        self.server_uri = server_uri

    @classmethod
    def is_supported(cls) -> bool:
        return hasattr(socket, "create_connection") and hasattr(ssl, "create_default_context")

    def build_request(self, address: ServerAddress, payload: bytes) -> RequestBuilder:
        request = RequestBuilder()
        request.set_scheme(address.scheme)
        request.set_host(address.host)
        request.set_type("POST")
        request.set_path(address.path)
        if address.query:
            request.set_query("?" + address.query)
        request.set_user_agent(self.user_agent)
        request.add_header("Content-Type", CONTENT_TYPE)
        request.add_header("Content-Length", len(payload))
        request.set_data(payload)
        return request

    def send(self, payload: bytes) -> bytes:
        address = parse_server_uri(self.server_uri)
        request = self.build_request(address, payload)
        port = address.connect_port

        logging.debug(
            "Opening %s connection to %s:%d",
            "TLS" if request.is_secure() else "plain",
            address.host,
            port,
        )
        try:
            sock = self._connect(
                address.host,
                port,
                secure=request.is_secure(),
                timeout=self.connect_timeout,
            )
        except TimeoutError as exc:
            raise ProxyTimeoutError(
                f"Timed out connecting to {address.host}:{port}",
                errno=exc.errno,
                strerror=exc.strerror,
            ) from exc
        except OSError as exc:
            raise ProxyConnectionError(
                f"Cannot open socket ({exc.errno}): {exc.strerror or exc}",
                errno=exc.errno,
                strerror=exc.strerror or str(exc),
            ) from exc

        try:
            response = self._exchange(sock, request.serialize())
        finally:
            sock.close()

        response.raise_for_status()
        logging.debug(
            "Received %d body bytes from %s (%s)",
            len(response.body),
            address.host,
            response.status_line,
        )
        return response.body

    def _exchange(self, sock: socket.socket, raw_request: bytes) -> RawResponse:
        try:
            sock.settimeout(self.read_timeout)
            sock.sendall(raw_request)
            with sock.makefile("rb") as stream:
                return read_response(stream, max_bytes=self.max_response_bytes)
        except TimeoutError as exc:
            raise ProxyTimeoutError(
                f"Timed out waiting for the API server after {self.read_timeout}s",
                errno=exc.errno,
                strerror=exc.strerror,
            ) from exc
        except OSError as exc:
            raise ProxyConnectionError(
                f"Connection failed during exchange: {exc}",
                errno=exc.errno,
                strerror=exc.strerror or str(exc),
            ) from exc


class RequestsProxy:
    """
    Transport backed by :mod:`requests`, for environments where an HTTP
    client library is preferred over raw sockets.
    """

    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        user_agent: str = USER_AGENT,
        connect_timeout: Optional[float] = DEFAULT_CONNECT_TIMEOUT,
        read_timeout: Optional[float] = DEFAULT_READ_TIMEOUT,
    ) -> None:
        self.server_uri: Optional[str] = None
        self.session = session or requests.Session()
        self.user_agent = user_agent
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout

    def init(self, server_uri: str) -> None:
        self.server_uri = server_uri

    @classmethod
    def is_supported(cls) -> bool:
        return True

    def send(self, payload: bytes) -> bytes:
        parse_server_uri(self.server_uri)
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "*/*",
            "Content-Type": CONTENT_TYPE,
            "Connection": "Close",
        }
        logging.debug("POST %s (%d bytes)", self.server_uri, len(payload))
        try:
            response = self.session.post(
                self.server_uri,
                data=payload,
                headers=headers,
                timeout=(self.connect_timeout, self.read_timeout),
            )
        except requests.exceptions.Timeout as exc:
            raise ProxyTimeoutError(f"Timed out talking to {self.server_uri}: {exc}") from exc
        except (
            requests.exceptions.InvalidURL,
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
        ) as exc:
            raise MalformedURIError(f"Malformed server URI supplied: {self.server_uri!r}") from exc
        except requests.exceptions.RequestException as exc:
            raise ProxyConnectionError(
                f"Cannot reach {self.server_uri}: {exc}",
                strerror=str(exc),
            ) from exc

        if not 200 <= response.status_code < 300:
            raise UpstreamError(
                f"API server responded with {response.status_code} {response.reason or ''}".rstrip(),
                status_code=response.status_code,
                reason=response.reason or "",
                body=response.content,
            )
        return response.content


_TRANSPORTS = {
    "socket": SocketProxy,
    "requests": RequestsProxy,
}


def select_proxy(
    preferred: Sequence[Type[ProxyCapability]] = (SocketProxy, RequestsProxy),
) -> Type[ProxyCapability]:
    """
    Return the first transport class the running interpreter supports.
    """
    for candidate in preferred:
        if candidate.is_supported():
            return candidate
    names = ", ".join(candidate.__name__ for candidate in preferred)
    raise ConfigError(f"None of the transports are supported here: {names}")


def build_proxy(config: "PayPalConfig") -> ProxyCapability:
    """
    Instantiate the transport named by ``config.transport``.

    Falls back to :func:`select_proxy` when the named transport is not
    supported by the runtime.
    """
    try:
        proxy_cls = _TRANSPORTS[config.transport]
    except KeyError as exc:
        raise ConfigError(f"Unknown transport '{config.transport}'") from exc

    if not proxy_cls.is_supported():
        fallback = select_proxy()
        logging.warning(
            "Transport %s is not supported here, using %s instead",
            proxy_cls.__name__,
            fallback.__name__,
        )
        proxy_cls = fallback

    return proxy_cls(
        user_agent=config.user_agent,
        connect_timeout=config.connect_timeout,
        read_timeout=config.read_timeout,
    )
