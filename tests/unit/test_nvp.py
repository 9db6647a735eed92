"""
Unit tests for the NVP codec and payload builders.
"""

from decimal import Decimal

import pytest

from paypal_nvp.core.errors import DecodeError, InvalidArgumentError
from paypal_nvp.core.nvp import (
    NVPResponse,
    build_call_parameters,
    build_get_express_checkout_details,
    build_set_express_checkout,
    decode_nvp,
    encode_nvp,
    format_amount,
)


class TestCodec:

    def test_encode_preserves_order(self):
        assert encode_nvp({"METHOD": "Ping", "AMT": "1.00", "EMPTY": None}) == b"METHOD=Ping&AMT=1.00&EMPTY="

    def test_encode_escapes(self):
        assert encode_nvp({"RETURNURL": "https://shop/return?a=1&b=2"}) == (
            b"RETURNURL=https%3A%2F%2Fshop%2Freturn%3Fa%3D1%26b%3D2"
        )

    def test_decode(self):
        assert decode_nvp(b"ACK=Success&TOKEN=EC%2d123&TIMESTAMP=2026%2d10%2d20T10%3a00%3a00Z") == {
            "ACK": "Success",
            "TOKEN": "EC-123",
            "TIMESTAMP": "2026-10-20T10:00:00Z",
        }

    def test_decode_keeps_blanks_and_last_duplicate(self):
        assert decode_nvp("A=&B=1&B=2") == {"A": "", "B": "2"}

    def test_decode_plus_as_space(self):
        assert decode_nvp("L_LONGMESSAGE0=Security+header+is+not+valid") == {
            "L_LONGMESSAGE0": "Security header is not valid"
        }

    def test_decode_invalid_utf8_bytes(self):
        with pytest.raises(DecodeError):
            decode_nvp(b"ACK=Success&NAME=\xff\xfe")

    def test_decode_invalid_utf8_escape(self):
        with pytest.raises(DecodeError):
            decode_nvp(b"ACK=Success&NAME=%FF%FE")

    def test_decode_utf8_escape(self):
        assert decode_nvp(b"NAME=J%C3%BCrgen") == {"NAME": "Jürgen"}

    def test_roundtrip(self):
        original = {
            "RETURNURL": "https://shop.example/return?order=42&x=y",
            "DESC": "Two mugs & a t-shirt (100% cotton)",
            "NAME": "Jürgen Ämmer",
            "EMPTY": "",
        }

        assert decode_nvp(encode_nvp(original)) == original


class TestBuilders:

    def test_call_parameters(self):
        merged = build_call_parameters(
            "SetExpressCheckout",
            {"VERSION": "53.0", "PWD": "p", "USER": "u", "SIGNATURE": "s"},
            {"AMT": "1.00"},
        )

        assert list(merged) == ["METHOD", "VERSION", "PWD", "USER", "SIGNATURE", "AMT"]
        assert merged["METHOD"] == "SetExpressCheckout"

    def test_call_parameters_caller_wins(self):
        merged = build_call_parameters("Ping", {"VERSION": "53.0"}, {"VERSION": "204.0"})

        assert merged["VERSION"] == "204.0"

    def test_set_express_checkout(self):
        assert build_set_express_checkout(
            Decimal("19.9"), "usd", "https://r", "https://c", "Sale"
        ) == {
            "AMT": "19.90",
            "PAYMENTACTION": "Sale",
            "RETURNURL": "https://r",
            "CANCELURL": "https://c",
            "CURRENCYCODE": "USD",
        }

    def test_set_express_checkout_without_action(self):
        assert "PAYMENTACTION" not in build_set_express_checkout(5, "EUR", "r", "c")

    def test_get_details(self):
        assert build_get_express_checkout_details("EC-1") == {"TOKEN": "EC-1"}

    @pytest.mark.parametrize("amount,expected", [(10, "10.00"), ("0.5", "0.50"), (1.234, "1.23")])
    def test_format_amount(self, amount, expected):
        assert format_amount(amount) == expected

    @pytest.mark.parametrize("amount", ["abc", 0, "-1", "NaN", "Infinity"])
    def test_format_amount_rejects(self, amount):
        with pytest.raises(InvalidArgumentError):
            format_amount(amount)


class TestNVPResponse:

    def test_success(self):
        response = NVPResponse.from_mapping(
            {"ACK": "Success", "TOKEN": "EC-1", "CORRELATIONID": "abc"}
        )

        assert response.is_success is True
        assert response.token == "EC-1"
        assert response.correlation_id == "abc"
        assert response.errors == []

    def test_success_with_warning(self):
        assert NVPResponse.from_mapping({"ACK": "SuccessWithWarning"}).is_success is True

    def test_failure_collects_errors(self):
        response = NVPResponse.from_mapping(
            {
                "ACK": "Failure",
                "L_ERRORCODE1": "10004",
                "L_LONGMESSAGE1": "Invalid amount",
                "L_ERRORCODE0": "10002",
                "L_SHORTMESSAGE0": "Security error",
                "L_SEVERITYCODE0": "Error",
            }
        )

        assert response.is_success is False
        assert [error.code for error in response.errors] == ["10002", "10004"]
        assert response.errors[0].severity == "Error"
        assert response.describe_errors() == "10002: Security error; 10004: Invalid amount"

    def test_missing_ack(self):
        with pytest.raises(DecodeError):
            NVPResponse.from_mapping({"TOKEN": "EC-1"})
