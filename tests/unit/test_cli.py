"""
Unit tests for the command-line interface.
"""

from pathlib import Path
from typing import List

import pytest

from paypal_nvp import cli
from paypal_nvp.core.errors import ProxyConnectionError
from paypal_nvp.core.nvp import decode_nvp
from paypal_nvp.core.proxy import SocketProxy


@pytest.fixture
def env_file(tmp_path: Path, monkeypatch) -> str:
    for key in ("PAYPAL_API_USERNAME", "PAYPAL_API_PASSWORD", "PAYPAL_API_SIGNATURE"):
        monkeypatch.delenv(key, raising=False)
    path = tmp_path / ".env"
    path.write_text(
        "PAYPAL_API_USERNAME=cli-user\n"
        "PAYPAL_API_PASSWORD=cli-secret\n"
        "PAYPAL_API_SIGNATURE=cli-signature\n",
        encoding="utf-8",
    )
    return str(path)


@pytest.fixture
def sent(monkeypatch) -> List[bytes]:
    """Replace the socket transport with canned replies."""
    payloads: List[bytes] = []
    replies = {
        "SetExpressCheckout": b"ACK=Success&TOKEN=EC-42",
        "GetExpressCheckoutDetails": b"ACK=Success&TOKEN=EC-42",
    }

    def fake_send(self, payload: bytes) -> bytes:
        payloads.append(payload)
        return replies[decode_nvp(payload)["METHOD"]]

    monkeypatch.setattr(SocketProxy, "send", fake_send)
    return payloads


def test_start_prints_redirect(env_file, sent, capsys):
    code = cli.run_cli(
        [
            "--env-file", env_file,
            "start",
            "--amount", "12.5",
            "--return-url", "https://shop/return",
            "--cancel-url", "https://shop/cancel",
        ]
    )

    assert code == 0
    assert capsys.readouterr().out.strip().endswith("token=EC-42")
    assert decode_nvp(sent[0])["AMT"] == "12.50"
    assert decode_nvp(sent[0])["USER"] == "cli-user"


def test_validate(env_file, sent, capsys):
    code = cli.run_cli(["--env-file", env_file, "validate", "--token", "EC-42"])

    assert code == 0
    assert capsys.readouterr().out.strip() == "valid"


def test_set_override(env_file, sent):
    cli.run_cli(
        ["--env-file", env_file, "--set", "PAYPAL_API_USERNAME=override", "validate", "--token", "EC-42"]
    )

    assert decode_nvp(sent[0])["USER"] == "override"


def test_invalid_configuration(tmp_path, monkeypatch):
    for key in ("PAYPAL_API_USERNAME", "PAYPAL_API_PASSWORD", "PAYPAL_API_SIGNATURE"):
        monkeypatch.delenv(key, raising=False)

    code = cli.run_cli(["--env-file", str(tmp_path / "missing.env"), "validate", "--token", "EC-1"])

    assert code == 1


def test_transport_failure(env_file, monkeypatch):
    def refuse(self, payload):
        raise ProxyConnectionError("Cannot open socket (111): Connection refused", errno=111)

    monkeypatch.setattr(SocketProxy, "send", refuse)

    assert cli.run_cli(["--env-file", env_file, "validate", "--token", "EC-1"]) == 1


def test_bad_override_syntax(env_file):
    with pytest.raises(SystemExit):
        cli.run_cli(["--env-file", env_file, "--set", "novalue", "validate", "--token", "x"])


def test_main_exits_with_code(env_file, sent):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["--env-file", env_file, "validate", "--token", "EC-42"])

    assert exc_info.value.code == 0
