"""
Helpers for building and decoding the name-value-pair bodies exchanged with
the PayPal API.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional, Union
from urllib.parse import parse_qsl, urlencode

from .errors import DecodeError, InvalidArgumentError

__all__ = [
    "NVPError",
    "NVPResponse",
    "build_call_parameters",
    "build_get_express_checkout_details",
    "build_set_express_checkout",
    "decode_nvp",
    "encode_nvp",
    "format_amount",
]

SUCCESS_ACKS = ("SUCCESS", "SUCCESSWITHWARNING")

_ERROR_FIELD = re.compile(r"^L_(ERRORCODE|SHORTMESSAGE|LONGMESSAGE|SEVERITYCODE)(\d+)$")


def encode_nvp(parameters: Mapping[str, Any]) -> bytes:
    """Form-encode ``parameters`` in insertion order."""
    pairs = [(key, "" if value is None else str(value)) for key, value in parameters.items()]
    return urlencode(pairs).encode("utf-8")


def decode_nvp(raw: Union[bytes, str]) -> Dict[str, str]:
    """
    Decode a form-encoded response body.

    Blank values are kept and a repeated key keeps its last value. Bytes or
    percent-escapes that are not valid UTF-8 raise :class:`DecodeError`.
    """
    try:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return dict(parse_qsl(raw.strip(), keep_blank_values=True, errors="strict"))
    except UnicodeDecodeError as exc:
        raise DecodeError(f"API response is not valid UTF-8: {exc}") from exc


def format_amount(amount: Union[Decimal, str, float, int]) -> str:
    try:
        value = Decimal(str(amount))
    except InvalidOperation as exc:
        raise InvalidArgumentError(f"Amount must be a decimal number, got {amount!r}") from exc
    if not value.is_finite() or value <= 0:
        raise InvalidArgumentError(f"Amount must be greater than zero, got {amount!r}")
    return f"{value:.2f}"


def build_call_parameters(
    method: str,
    credentials: Mapping[str, str],
    parameters: Mapping[str, Any],
) -> Dict[str, Any]:
    """
    Merge the API method, the authentication block and the call parameters.

    Call parameters override the authentication block on collisions.
    """
    merged: Dict[str, Any] = {"METHOD": method}
    merged.update(credentials)
    merged.update(parameters)
    return merged


def build_set_express_checkout(
    amount: Union[Decimal, str, float, int],
    currency: str,
    return_uri: str,
    cancel_uri: str,
    payment_action: str = "",
) -> Dict[str, str]:
    parameters = {"AMT": format_amount(amount)}
    if payment_action:
        parameters["PAYMENTACTION"] = payment_action
    parameters.update(
        {
            "RETURNURL": return_uri,
            "CANCELURL": cancel_uri,
            "CURRENCYCODE": currency.upper(),
        }
    )
    return parameters


def build_get_express_checkout_details(token: str) -> Dict[str, str]:
    return {"TOKEN": token}


@dataclass(frozen=True)
class NVPError:
    code: str
    short_message: str = ""
    long_message: str = ""
    severity: str = ""

    def __str__(self) -> str:
        message = self.long_message or self.short_message
        return f"{self.code}: {message}" if message else self.code


@dataclass(frozen=True)
class NVPResponse:
    ack: str
    token: Optional[str]
    correlation_id: Optional[str]
    errors: List[NVPError] = field(default_factory=list)
    raw: Dict[str, str] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.ack.upper() in SUCCESS_ACKS

    def describe_errors(self) -> str:
        return "; ".join(str(error) for error in self.errors)

    @classmethod
    def from_mapping(cls, fields: Mapping[str, str]) -> "NVPResponse":
        if "ACK" not in fields:
            raise DecodeError(f"API response carries no ACK field: {dict(fields)!r}")

        collected: Dict[int, Dict[str, str]] = {}
        for key, value in fields.items():
            match = _ERROR_FIELD.match(key)
            if match is None:
                continue
            kind, index = match.groups()
            collected.setdefault(int(index), {})[kind] = value

        errors = [
            NVPError(
                code=entry.get("ERRORCODE", ""),
                short_message=entry.get("SHORTMESSAGE", ""),
                long_message=entry.get("LONGMESSAGE", ""),
                severity=entry.get("SEVERITYCODE", ""),
            )
            for _, entry in sorted(collected.items())
        ]

        return cls(
            ack=fields["ACK"],
            token=fields.get("TOKEN") or None,
            correlation_id=fields.get("CORRELATIONID") or None,
            errors=errors,
            raw=dict(fields),
        )
