"""
Parsing of raw HTTP/1.1 responses read from a stream.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import BinaryIO, Dict, List, Optional

from .errors import UpstreamError

__all__ = [
    "DEFAULT_MAX_RESPONSE_BYTES",
    "RawResponse",
    "StatusLine",
    "parse_headers",
    "read_response",
]

DEFAULT_MAX_RESPONSE_BYTES = 1024 * 1024

_STATUS_LINE = re.compile(r"^(HTTP/\d+(?:\.\d+)?)\s+(\d{3})(?:\s+(.*))?$")


@dataclass(frozen=True)
class StatusLine:
    version: str
    code: int
    reason: str

    @classmethod
    def parse(cls, line: str) -> "StatusLine":
        match = _STATUS_LINE.match(line.strip())
        if match is None:
            raise UpstreamError(f"Malformed status line: {line.strip()!r}")
        version, code, reason = match.groups()
        return cls(version=version, code=int(code), reason=(reason or "").strip())

    @property
    def is_success(self) -> bool:
        return 200 <= self.code < 300


def parse_headers(lines: List[str]) -> Dict[str, str]:
    """
    Split header lines on their first colon.

    Lines without a colon are ignored. Names are kept as received; a repeated
    name keeps its last value.
    """
    headers: Dict[str, str] = {}
    for line in lines:
        if ":" not in line:
            continue
        name, value = line.split(":", 1)
        headers[name.strip()] = value.strip()
    return headers


@dataclass
class RawResponse:
    status_line: str
    header_lines: List[str] = field(default_factory=list)
    body: bytes = b""

    @property
    def headers(self) -> Dict[str, str]:
        return parse_headers(self.header_lines)

    @property
    def status(self) -> StatusLine:
        return StatusLine.parse(self.status_line)

    def raise_for_status(self) -> StatusLine:
        """
        Return the parsed status line when it reports success.

        Any non-2xx code, or a status line that cannot be parsed, raises
        :class:`UpstreamError`.
        """
        status = self.status
        if not status.is_success:
            raise UpstreamError(
                f"API server responded with {status.code} {status.reason}".rstrip(),
                status_code=status.code,
                reason=status.reason,
                body=self.body,
            )
        return status


def read_response(
    stream: BinaryIO,
    *,
    max_bytes: Optional[int] = DEFAULT_MAX_RESPONSE_BYTES,
) -> RawResponse:
    """
    Read a full response from ``stream`` until end of stream.

    Lines before the first blank line form the head (status line first);
    everything after it is the body, kept byte for byte.
    """
    head: List[str] = []
    body = bytearray()
    in_header = True
    total = 0

    while True:
        if max_bytes is None:
            line = stream.readline()
        else:
            # one byte past the budget is enough to detect an overrun
            line = stream.readline(max_bytes - total + 1)
        if not line:
            break
        total += len(line)
        if max_bytes is not None and total > max_bytes:
            raise UpstreamError(f"Response exceeds {max_bytes} bytes")

        if in_header:
            text = line.decode("latin-1").rstrip("\r\n")
            if text == "":
                in_header = False
            else:
                head.append(text)
        else:
            body.extend(line)

    if not head:
        raise UpstreamError("API server closed the connection without a response")

    return RawResponse(status_line=head[0], header_lines=head[1:], body=bytes(body))
