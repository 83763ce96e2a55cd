"""Bittrex v1.1 REST API client with HMAC-SHA512 URI signing.

Key differences from Gemini:
- Private calls are GETs; ``apikey`` and ``nonce`` ride in the query string
- The signature covers the full request URI, scheme and host included
- Signature goes in the ``apisign`` header
"""
from __future__ import annotations
import hashlib
import hmac
import logging
from typing import Any, Dict, Mapping, Optional

from core.config import BITTREX_DEFAULTS, Override
from core.types import ApiAuth, BittrexSignature, RequestConfig, RestResponse
from core.utils import encode_query, time_now_ms
from gateway.base import ExchangeREST

log = logging.getLogger(__name__)


def sign_message(full_path: str, query_params: Optional[Mapping[str, Any]],
                 secret: str) -> BittrexSignature:
    """HMAC-SHA512 over ``full_path + "?" + encoded query``.

    The returned ``full_url`` is exactly the signed string and must be sent
    unmodified.
    """
    full_url = f"{full_path}?{encode_query(query_params)}"
    digest = hmac.new(
        secret.encode("utf-8"),
        full_url.encode("utf-8"),
        hashlib.sha512,
    ).hexdigest()
    return BittrexSignature(full_url=full_url, digest=digest)


def _present(**params: Any) -> Dict[str, Any]:
    """Drop optional arguments the caller left unset."""
    return {k: v for k, v in params.items() if v is not None}


class BittrexREST(ExchangeREST):
    """Async REST client for the Bittrex v1.1 API."""

    DEFAULTS = BITTREX_DEFAULTS

    sign_message = staticmethod(sign_message)

    async def get_private_endpoint(self, endpoint: str,
                                   data: Optional[Mapping[str, Any]] = None,
                                   config_override: Override = None) -> RestResponse:
        auth = self._require_auth()
        return await self._send(self._private_request(auth, endpoint, data, config_override))

    def _private_request(self, auth: ApiAuth, endpoint: str,
                         data: Optional[Mapping[str, Any]],
                         config_override: Override) -> RequestConfig:
        config = self._resolve(config_override)

        full_path = self._endpoint_url(config, endpoint)
        query = {**(data or {}), "apikey": auth.public_key, "nonce": time_now_ms() * 1000}
        signature = sign_message(full_path, query, auth.private_key)
        log.debug("Signed %s nonce=%s", endpoint, query["nonce"])

        headers = {**config.headers, "apisign": signature.digest}
        if config_override is not None:
            headers.update(self._resolve_headers(config_override))
        return RequestConfig(
            method="GET",
            url=signature.full_url,
            headers=headers,
            timeout_ms=config.timeout_ms,
        )

    @staticmethod
    def _resolve_headers(config_override: Override) -> Dict[str, str]:
        if isinstance(config_override, Mapping):
            raw = config_override.get("headers") or {}
        else:
            raw = getattr(config_override, "headers", None) or {}
        return {str(k): str(v) for k, v in raw.items()}

    # --- Public market data ---

    async def get_markets(self) -> RestResponse:
        return await self.get_public_endpoint("public/getmarkets")

    async def get_currencies(self) -> RestResponse:
        return await self.get_public_endpoint("public/getcurrencies")

    async def get_ticker(self, market: str) -> RestResponse:
        return await self.get_public_endpoint("public/getticker", {"market": market})

    async def get_market_summaries(self) -> RestResponse:
        return await self.get_public_endpoint("public/getmarketsummaries")

    async def get_market_summary(self, market: str) -> RestResponse:
        return await self.get_public_endpoint("public/getmarketsummary", {"market": market})

    async def get_order_book(self, market: str, type: Optional[str] = None) -> RestResponse:
        """``type`` is ``buy``, ``sell`` or ``both`` (default)."""
        return await self.get_public_endpoint(
            "public/getorderbook", {"market": market, "type": type or "both"},
        )

    async def get_market_history(self, market: str) -> RestResponse:
        return await self.get_public_endpoint("public/getmarkethistory", {"market": market})

    # --- Market (orders) ---

    async def buy_limit(self, market: str, quantity: float, rate: float) -> RestResponse:
        return await self.get_private_endpoint(
            "market/buylimit", {"market": market, "quantity": quantity, "rate": rate},
        )

    async def sell_limit(self, market: str, quantity: float, rate: float) -> RestResponse:
        return await self.get_private_endpoint(
            "market/selllimit", {"market": market, "quantity": quantity, "rate": rate},
        )

    async def cancel(self, uuid: str) -> RestResponse:
        return await self.get_private_endpoint("market/cancel", {"uuid": uuid})

    async def get_open_orders(self, market: Optional[str] = None) -> RestResponse:
        return await self.get_private_endpoint("market/getopenorders", _present(market=market))

    # --- Account ---

    async def get_balances(self) -> RestResponse:
        return await self.get_private_endpoint("account/getbalances")

    async def get_balance(self, currency: str) -> RestResponse:
        return await self.get_private_endpoint("account/getbalance", {"currency": currency})

    async def get_deposit_address(self, currency: str) -> RestResponse:
        return await self.get_private_endpoint("account/getdepositaddress", {"currency": currency})

    async def withdraw(self, currency: str, quantity: float, address: str,
                       payment_id: Optional[str] = None) -> RestResponse:
        params = _present(currency=currency, quantity=quantity, address=address,
                          paymentid=payment_id)
        return await self.get_private_endpoint("account/withdraw", params)

    async def get_order(self, uuid: str) -> RestResponse:
        return await self.get_private_endpoint("account/getorder", {"uuid": uuid})

    async def get_order_history(self, market: Optional[str] = None) -> RestResponse:
        return await self.get_private_endpoint("account/getorderhistory", _present(market=market))

    async def get_withdrawal_history(self, currency: Optional[str] = None) -> RestResponse:
        return await self.get_private_endpoint(
            "account/getwithdrawalhistory", _present(currency=currency),
        )

    async def get_deposit_history(self, currency: Optional[str] = None) -> RestResponse:
        return await self.get_private_endpoint(
            "account/getdeposithistory", _present(currency=currency),
        )
