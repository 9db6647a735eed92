"""
Minimal HTTP/1.1 request builder used by the socket transport.

The builder is mutated through setters and serialized once into the exact
bytes written to the wire.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from .errors import HeaderIndexError, InvalidArgumentError, MissingHostError

__all__ = [
    "ALLOWED_METHODS",
    "DEFAULT_USER_AGENT",
    "HTTP_VERSION",
    "HeaderHandle",
    "NEWLINE",
    "RequestBuilder",
]

HTTP_VERSION = "HTTP/1.1"
NEWLINE = "\r\n"
ALLOWED_METHODS = ("GET", "POST", "PUT", "OPTIONS")
DEFAULT_USER_AGENT = "HansPeter/1.1"

_handle_serials = itertools.count(1)


@dataclass(frozen=True)
class HeaderHandle:
    """
    Opaque reference to a header added with :meth:`RequestBuilder.add_header`.

    A handle stays valid until its own header is removed; removing other
    headers does not affect it.
    """

    serial: int


class RequestBuilder:
    """
    Builds an HTTP/1.1 request.

    ``query`` is appended to ``path`` verbatim, so callers must include the
    leading ``?`` themselves.
    """

    def __init__(self) -> None:
        self._scheme = "http"
        self._host: Optional[str] = None
        self._port: Optional[int] = None
        self._path = "/"
        self._query = ""
        self._type = "GET"
        self._user_agent = DEFAULT_USER_AGENT
        self._connection = "Close"
        self._data = b""
        self._headers: Dict[HeaderHandle, Tuple[str, str]] = {}

    @property
    def scheme(self) -> str:
        return self._scheme

    @property
    def host(self) -> Optional[str]:
        return self._host

    @property
    def port(self) -> Optional[int]:
        return self._port

    @property
    def path(self) -> str:
        return self._path

    @property
    def query(self) -> str:
        return self._query

    @property
    def type(self) -> str:
        return self._type

    @property
    def user_agent(self) -> str:
        return self._user_agent

    @property
    def connection(self) -> str:
        return self._connection

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def headers(self) -> List[Tuple[str, str]]:
        """Live headers in insertion order."""
        return list(self._headers.values())

    def set_scheme(self, scheme: str) -> None:
        self._scheme = scheme

    def set_host(self, host: Optional[str]) -> None:
        self._host = host

    def set_port(self, port: Optional[int]) -> None:
        self._port = port

    def set_path(self, path: str) -> None:
        self._path = path

    def set_query(self, query: Optional[str]) -> None:
        self._query = query or ""

    def set_type(self, method: str) -> None:
        if method not in ALLOWED_METHODS:
            raise InvalidArgumentError(f"Wrong request type supplied: {method!r}")
        self._type = method

    def set_user_agent(self, user_agent: str) -> None:
        self._user_agent = user_agent

    def set_connection(self, connection: str) -> None:
        self._connection = connection

    def set_data(self, data: Union[str, bytes]) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._data = data

    def add_header(self, name: str, value: object) -> HeaderHandle:
        handle = HeaderHandle(next(_handle_serials))
        self._headers[handle] = (name, str(value))
        return handle

    def remove_header(self, handle: HeaderHandle) -> None:
        try:
            del self._headers[handle]
        except (KeyError, TypeError) as exc:
            raise HeaderIndexError(f"Index out of bounds: {handle!r}") from exc

    def is_secure(self) -> bool:
        return self._scheme == "https"

    def serialize(self) -> bytes:
        """
        Render the request as wire bytes.

        Raises :class:`MissingHostError` when no host has been set.
        """
        if not self._host:
            raise MissingHostError("No hostname supplied.")

        lines = [
            f"{self._type} {self._path}{self._query} {HTTP_VERSION}",
            f"User-Agent: {self._user_agent}",
            "Accept: */*",
            f"Host: {self._host}",
        ]
        lines.extend(f"{name}: {value}" for name, value in self._headers.values())
        lines.append(f"Connection: {self._connection}")

        head = NEWLINE.join(lines) + NEWLINE + NEWLINE
        try:
            return head.encode("latin-1") + self._data
        except UnicodeEncodeError as exc:
            raise InvalidArgumentError(
                f"Request head contains characters outside ISO-8859-1: {exc.object[exc.start:exc.end]!r}"
            ) from exc

    def __bytes__(self) -> bytes:
        return self.serialize()
