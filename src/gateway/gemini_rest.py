"""Gemini REST API client with HMAC-SHA384 payload signing.

Private calls are POSTs whose parameters travel in the ``X-GEMINI-PAYLOAD``
header: base64 of a JSON object carrying the caller's fields plus ``nonce``
and ``request`` (the endpoint path). The literal request body stays empty.
"""
from __future__ import annotations
import base64
import hashlib
import hmac
import logging
from typing import Any, Dict, Mapping, Optional

import orjson

from core.config import GEMINI_DEFAULTS, Override
from core.types import ApiAuth, GeminiSignature, RequestConfig, RestResponse
from core.utils import time_now_ms
from gateway.base import ExchangeREST

log = logging.getLogger(__name__)


def sign_message(path: str, post_data: Optional[Mapping[str, Any]], secret: str,
                 nonce: Optional[str] = None) -> GeminiSignature:
    """Sign a Gemini private request.

    ``nonce`` and ``request`` always override same-named keys in
    ``post_data``. Output is deterministic for a given nonce.
    """
    if nonce is None:
        nonce = str(time_now_ms())
    body: Dict[str, Any] = {**(post_data or {}), "nonce": nonce, "request": path}
    payload = base64.b64encode(orjson.dumps(body)).decode("ascii")
    digest = hmac.new(
        secret.encode("utf-8"),
        payload.encode("utf-8"),
        hashlib.sha384,
    ).hexdigest()
    return GeminiSignature(payload=payload, digest=digest)


class GeminiREST(ExchangeREST):
    """Async REST client for the Gemini v1 API."""

    DEFAULTS = GEMINI_DEFAULTS

    sign_message = staticmethod(sign_message)

    async def post_to_private_endpoint(self, endpoint: str,
                                       data: Optional[Mapping[str, Any]] = None,
                                       config_override: Override = None) -> RestResponse:
        """POST to an authenticated endpoint, e.g. ``balances`` or ``order/new``."""
        auth = self._require_auth()
        return await self._send(self._private_request(auth, endpoint, data, config_override))

    def _private_request(self, auth: ApiAuth, endpoint: str,
                         data: Optional[Mapping[str, Any]],
                         config_override: Override) -> RequestConfig:
        config = self._resolve(config_override)

        path = f"/{config.version}/{endpoint.lstrip('/')}"
        signature = sign_message(path, data, auth.private_key)
        log.debug("Signed %s", path)

        headers = {
            **config.headers,
            "X-GEMINI-APIKEY": auth.public_key,
            "X-GEMINI-PAYLOAD": signature.payload,
            "X-GEMINI-SIGNATURE": signature.digest,
        }
        return RequestConfig(
            method="POST",
            url=f"{config.root_url}{path}",
            headers=headers,
            body=b"",
            timeout_ms=config.timeout_ms,
        )
