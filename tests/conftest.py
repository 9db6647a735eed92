"""
pytest configuration and fixtures.
"""

import io
import socket
import sys
import threading
from pathlib import Path
from typing import Generator, List, Optional

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from paypal_nvp import PayPalConfig


OK_RESPONSE = (
    b"HTTP/1.1 200 OK\r\n"
    b"Date: Tue, 20 Oct 2026 10:00:00 GMT\r\n"
    b"Content-Type: text/plain; charset=utf-8\r\n"
    b"Connection: close\r\n"
    b"\r\n"
    b"ACK=Success&TOKEN=abc123"
)


@pytest.fixture
def paypal_config() -> PayPalConfig:
    """Sandbox configuration with dummy credentials."""
    return PayPalConfig(
        username="api-user",
        password="api-secret",
        signature="api-signature",
    )


class RecordingProxy:
    """In-memory transport that records payloads and replays canned replies."""

    def __init__(self, *responses: bytes):
        self.responses: List[bytes] = list(responses)
        self.payloads: List[bytes] = []
        self.server_uri: Optional[str] = None

    def init(self, server_uri: str) -> None:
        self.server_uri = server_uri

    def send(self, payload: bytes) -> bytes:
        self.payloads.append(payload)
        return self.responses.pop(0)

    @classmethod
    def is_supported(cls) -> bool:
        return True


@pytest.fixture
def recording_proxy() -> RecordingProxy:
    return RecordingProxy()


class FakeSocket:
    """Socket stand-in that serves a fixed response and records what was sent."""

    def __init__(self, response: bytes, *, fail_on_send: Optional[OSError] = None):
        self.response = response
        self.sent = b""
        self.timeout: Optional[float] = None
        self.closed = False
        self.fail_on_send = fail_on_send

    def settimeout(self, timeout: Optional[float]) -> None:
        self.timeout = timeout

    def sendall(self, data: bytes) -> None:
        if self.fail_on_send is not None:
            raise self.fail_on_send
        self.sent += data

    def makefile(self, mode: str = "rb") -> io.BytesIO:
        return io.BytesIO(self.response)

    def close(self) -> None:
        self.closed = True


class FakeConnector:
    """Connection factory handing out one :class:`FakeSocket`."""

    def __init__(self, sock: FakeSocket):
        self.sock = sock
        self.calls: List[dict] = []

    def __call__(self, host: str, port: int, *, secure: bool, timeout: Optional[float]) -> FakeSocket:
        self.calls.append({"host": host, "port": port, "secure": secure, "timeout": timeout})
        return self.sock


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class OneShotServer:
    """Accepts a single connection, captures the request and replies."""

    def __init__(self, response: bytes):
        self.response = response
        self.request = b""
        self._listener = socket.create_server(("127.0.0.1", 0))
        self.port = self._listener.getsockname()[1]
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def _serve(self) -> None:
        conn, _ = self._listener.accept()
        with conn:
            conn.settimeout(5.0)
            while b"\r\n\r\n" not in self.request:
                chunk = conn.recv(4096)
                if not chunk:
                    break
                self.request += chunk
            head, _, body = self.request.partition(b"\r\n\r\n")
            length = 0
            for line in head.split(b"\r\n"):
                if line.lower().startswith(b"content-length:"):
                    length = int(line.split(b":", 1)[1])
            while len(body) < length:
                chunk = conn.recv(4096)
                if not chunk:
                    break
                body += chunk
                self.request += chunk
            conn.sendall(self.response)

    def stop(self) -> None:
        self._thread.join(timeout=5.0)
        self._listener.close()


@pytest.fixture
def one_shot_server() -> Generator:
    """Factory fixture: ``one_shot_server(response_bytes)`` starts a server."""
    servers: List[OneShotServer] = []

    def factory(response: bytes = OK_RESPONSE) -> OneShotServer:
        server = OneShotServer(response)
        server.start()
        servers.append(server)
        return server

    yield factory

    for server in servers:
        server.stop()
