"""
Configuration objects and helpers for the PayPal NVP client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .environment import build_environment

__all__ = [
    "API_VERSION",
    "ConfigError",
    "LIBRARY_VERSION",
    "LIVE_AUTHORIZATION_URI",
    "LIVE_SERVER_URI",
    "PayPalConfig",
    "PayPalParameters",
    "SANDBOX_AUTHORIZATION_URI",
    "SANDBOX_SERVER_URI",
    "TRANSPORTS",
    "USER_AGENT",
    "load_paypal_config",
]

API_VERSION = "53.0"
LIBRARY_VERSION = "0.1.0"
LIVE_SERVER_URI = "https://api-3t.paypal.com/nvp"
SANDBOX_SERVER_URI = "https://api-3t.sandbox.paypal.com/nvp"
LIVE_AUTHORIZATION_URI = "https://www.paypal.com/cgi-bin/webscr?cmd=_express-checkout&token="
SANDBOX_AUTHORIZATION_URI = (
    "https://www.sandbox.paypal.com/cgi-bin/webscr?cmd=_express-checkout&token="
)
USER_AGENT = f"paypal-nvp/{LIBRARY_VERSION} (+https://github.com/Evil-Co/PayPalLib)"
TRANSPORTS = ("socket", "requests")

_PARAMETER_TO_ENV_KEY = {
    "username": "PAYPAL_API_USERNAME",
    "password": "PAYPAL_API_PASSWORD",
    "signature": "PAYPAL_API_SIGNATURE",
    "sandbox": "PAYPAL_SANDBOX",
    "server_uri": "PAYPAL_SERVER_URI",
    "authorization_uri": "PAYPAL_AUTHORIZATION_URI",
    "api_version": "PAYPAL_API_VERSION",
    "user_agent": "PAYPAL_USER_AGENT",
    "transport": "PAYPAL_TRANSPORT",
    "connect_timeout": "PAYPAL_CONNECT_TIMEOUT",
    "read_timeout": "PAYPAL_READ_TIMEOUT",
}

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ConfigError(ValueError):
    """Raised when the supplied configuration is invalid."""


@dataclass(frozen=True)
class PayPalParameters:
    """
    Explicit parameter bundle for constructing :class:`PayPalConfig`.

    Callers can either instantiate this helper or pass the individual keyword
    arguments directly to :func:`load_paypal_config`.
    """

    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    signature: Optional[str] = field(default=None, repr=False)
    sandbox: Optional[bool | str] = None
    server_uri: Optional[str] = None
    authorization_uri: Optional[str] = None
    api_version: Optional[str] = None
    user_agent: Optional[str] = None
    transport: Optional[str] = None
    connect_timeout: Optional[float | str] = None
    read_timeout: Optional[float | str] = None

    def as_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for field_name, env_key in _PARAMETER_TO_ENV_KEY.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            overrides[env_key] = _stringify(value)
        return overrides


def _collect_parameter_overrides(
    parameters: Optional[PayPalParameters],
    explicit: Mapping[str, Any],
) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    if parameters is not None:
        overrides.update(parameters.as_overrides())

    for key, value in explicit.items():
        if value is None:
            continue
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:
            raise TypeError(f"Unknown PayPal parameter '{key}'") from exc
        overrides[env_key] = _stringify(value)
    return overrides


def _require(values: Mapping[str, str], key: str) -> str:
    value = values.get(key, "").strip()
    if not value:
        raise ConfigError(f"{key} must be provided")
    return value


def _parse_bool(raw: str, key: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{key} must be a boolean, got '{raw}'")


def _parse_timeout(raw: str, key: str) -> Optional[float]:
    value = raw.strip().lower()
    if value in ("", "none"):
        return None
    try:
        seconds = float(value)
    except ValueError as exc:
        raise ConfigError(f"{key} must be a number of seconds, got '{raw}'") from exc
    if seconds <= 0:
        raise ConfigError(f"{key} must be greater than zero")
    return seconds


@dataclass(frozen=True)
class PayPalConfig:
    username: str
    password: str = field(repr=False)
    signature: str = field(repr=False)
    sandbox: bool = True
    server_uri: str = SANDBOX_SERVER_URI
    authorization_uri: str = SANDBOX_AUTHORIZATION_URI
    api_version: str = API_VERSION
    user_agent: str = USER_AGENT
    transport: str = "socket"
    connect_timeout: Optional[float] = 10.0
    read_timeout: Optional[float] = 30.0

    def credentials(self) -> Dict[str, str]:
        """The authentication block sent with every API call."""
        return {
            "VERSION": self.api_version,
            "PWD": self.password,
            "USER": self.username,
            "SIGNATURE": self.signature,
        }

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "PayPalConfig":
        username = _require(values, "PAYPAL_API_USERNAME")
        password = _require(values, "PAYPAL_API_PASSWORD")
        signature = _require(values, "PAYPAL_API_SIGNATURE")

        sandbox = _parse_bool(values.get("PAYPAL_SANDBOX", "true"), "PAYPAL_SANDBOX")

        server_uri = values.get("PAYPAL_SERVER_URI") or (
            SANDBOX_SERVER_URI if sandbox else LIVE_SERVER_URI
        )
        authorization_uri = values.get("PAYPAL_AUTHORIZATION_URI") or (
            SANDBOX_AUTHORIZATION_URI if sandbox else LIVE_AUTHORIZATION_URI
        )

        transport = values.get("PAYPAL_TRANSPORT", "socket").strip().lower()
        if transport not in TRANSPORTS:
            raise ConfigError(
                f"PAYPAL_TRANSPORT must be one of {', '.join(TRANSPORTS)}, got '{transport}'"
            )

        return cls(
            username=username,
            password=password,
            signature=signature,
            sandbox=sandbox,
            server_uri=server_uri.strip(),
            authorization_uri=authorization_uri.strip(),
            api_version=values.get("PAYPAL_API_VERSION", API_VERSION).strip() or API_VERSION,
            user_agent=values.get("PAYPAL_USER_AGENT", USER_AGENT).strip() or USER_AGENT,
            transport=transport,
            connect_timeout=_parse_timeout(
                values.get("PAYPAL_CONNECT_TIMEOUT", "10"), "PAYPAL_CONNECT_TIMEOUT"
            ),
            read_timeout=_parse_timeout(
                values.get("PAYPAL_READ_TIMEOUT", "30"), "PAYPAL_READ_TIMEOUT"
            ),
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        parameters: Optional[PayPalParameters] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        signature: Optional[str] = None,
        sandbox: Optional[bool | str] = None,
        server_uri: Optional[str] = None,
        authorization_uri: Optional[str] = None,
        api_version: Optional[str] = None,
        user_agent: Optional[str] = None,
        transport: Optional[str] = None,
        connect_timeout: Optional[float | str] = None,
        read_timeout: Optional[float | str] = None,
    ) -> "PayPalConfig":
        parameter_overrides = _collect_parameter_overrides(
            parameters,
            {
                "username": username,
                "password": password,
                "signature": signature,
                "sandbox": sandbox,
                "server_uri": server_uri,
                "authorization_uri": authorization_uri,
                "api_version": api_version,
                "user_agent": user_agent,
                "transport": transport,
                "connect_timeout": connect_timeout,
                "read_timeout": read_timeout,
            },
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(environment.settings())


def load_paypal_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[PayPalParameters] = None,
    **fields: Any,
) -> PayPalConfig:
    """
    Convenience wrapper that mirrors :meth:`PayPalConfig.from_env`.

    The configuration can be provided through environment variables, a
    ``.env`` file, keyword arguments (``username=...``, ``sandbox=...``), or
    any combination of the three.
    """
    unknown = set(fields) - set(_PARAMETER_TO_ENV_KEY)
    if unknown:
        raise TypeError(f"Unknown PayPal parameter(s): {', '.join(sorted(unknown))}")
    return PayPalConfig.from_env(
        env_file=env_file,
        overrides=overrides,
        base=base,
        parameters=parameters,
        **fields,
    )
