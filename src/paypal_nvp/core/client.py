"""
PayPal Express Checkout client built on top of an NVP transport.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import quote

from .config import PayPalConfig
from .errors import DecodeError, PayPalError, PaymentRejectedError
from .nvp import (
    NVPResponse,
    build_call_parameters,
    build_get_express_checkout_details,
    build_set_express_checkout,
    decode_nvp,
    encode_nvp,
)
from .proxy import ProxyCapability, build_proxy

__all__ = [
    "CheckoutRedirect",
    "PayPalClient",
    "token_from_request",
]


@dataclass(frozen=True)
class CheckoutRedirect:
    """Where to send the buyer after a successful ``SetExpressCheckout``."""

    token: str
    url: str
    response: NVPResponse


def token_from_request(params: Mapping[str, Any]) -> str:
    """
    Extract the checkout token PayPal appends to the return URL.
    """
    token = params.get("token")
    if isinstance(token, (list, tuple)):
        token = token[-1] if token else None
    if not token:
        raise PayPalError("No payment information found in request.")
    return str(token)


class PayPalClient:
    """
    Thin wrapper around the NVP API methods used by Express Checkout.
    """

    def __init__(
        self,
        config: PayPalConfig,
        *,
        proxy: Optional[ProxyCapability] = None,
    ) -> None:
        self.config = config
        self.set_call_proxy(proxy if proxy is not None else build_proxy(config))

    def set_call_proxy(self, proxy: ProxyCapability) -> None:
        self.proxy = proxy
        self.proxy.init(self.config.server_uri)

    def decode_response(self, raw: Union[bytes, str]) -> Dict[str, str]:
        return decode_nvp(raw)

    def call(self, method: str, parameters: Mapping[str, Any]) -> Dict[str, str]:
        """
        Invoke an NVP API ``method`` and return the decoded reply.
        """
        query = build_call_parameters(method, self.config.credentials(), parameters)
        logging.info("Calling PayPal %s at %s", method, self.config.server_uri)
        raw = self.proxy.send(encode_nvp(query))
        return self.decode_response(raw)

    def start_payment(
        self,
        amount: Union[Decimal, str, float, int],
        currency: str,
        return_uri: str,
        cancel_uri: str,
        payment_action: str = "",
    ) -> CheckoutRedirect:
        parameters = build_set_express_checkout(
            amount, currency, return_uri, cancel_uri, payment_action
        )
        response = NVPResponse.from_mapping(self.call("SetExpressCheckout", parameters))

        if not response.is_success:
            raise PaymentRejectedError(
                f"Cannot start payment: got {response.ack} from API. {response.describe_errors()}".rstrip(),
                response,
            )
        if response.token is None:
            raise DecodeError("SetExpressCheckout succeeded but returned no TOKEN")

        url = self.config.authorization_uri + quote(response.token, safe="")
        logging.info("Checkout session %s created", response.token)
        return CheckoutRedirect(token=response.token, url=url, response=response)

    def get_checkout_details(self, token: str) -> NVPResponse:
        if not token:
            raise PayPalError("No payment information found in request.")
        parameters = build_get_express_checkout_details(token)
        return NVPResponse.from_mapping(self.call("GetExpressCheckoutDetails", parameters))

    def validate_payment(self, token: str) -> bool:
        """
        Confirm with PayPal that ``token`` belongs to a valid checkout session.

        Returns ``True`` or raises; a rejected token raises
        :class:`PaymentRejectedError`.
        """
        response = self.get_checkout_details(token)
        if not response.is_success:
            raise PaymentRejectedError(
                f"Got no valid response from PayPal: {response.ack}. {response.describe_errors()}".rstrip(),
                response,
            )
        return True
