"""Abstract base class for exchange REST clients.

Holds what Gemini and Bittrex share: the aiohttp session, the credential
state machine, unauthenticated GETs and the transport call with error
normalization. Subclasses supply the defaults and the private-call signing.
"""
from __future__ import annotations
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

import aiohttp
from yarl import URL

from core.config import ClientConfig, Override, resolve_config
from core.errors import TransportError, UnauthenticatedError, rejection_reason
from core.types import ApiAuth, RequestConfig, RestResponse
from core.utils import encode_query

log = logging.getLogger(__name__)


class ExchangeREST(ABC):
    """Async REST client for one exchange.

    A client starts *unupgraded* (public endpoints only) unless ``auth`` is
    given, and becomes *upgraded* via ``upgrade``. There is no downgrade.

    ``auth`` is a plain attribute with no locking: an ``upgrade`` racing an
    in-flight private call may or may not be seen by that call.
    """

    DEFAULTS: ClientConfig
    ERROR_FIELD = "error"

    def __init__(self, auth: Optional[ApiAuth] = None, config: Override = None,
                 session: Optional[aiohttp.ClientSession] = None):
        self.auth = auth
        self.config = resolve_config(self.DEFAULTS, config)
        self._session = session

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "ExchangeREST":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # --- Credentials ---

    def is_upgraded(self) -> bool:
        return self.auth is not None

    def upgrade(self, new_auth: ApiAuth) -> None:
        """Replace the stored credentials wholesale. Keys are not validated."""
        self.auth = new_auth
        log.info("%s client upgraded with key %s", type(self).__name__,
                 new_auth.public_key[:4] + "...")

    def _require_auth(self) -> ApiAuth:
        auth = self.auth
        if auth is None:
            raise UnauthenticatedError()
        return auth

    # --- Request building ---

    def _resolve(self, config_override: Override) -> ClientConfig:
        return resolve_config(self.config, config_override)

    @staticmethod
    def _endpoint_url(config: ClientConfig, endpoint: str) -> str:
        return f"{config.root_url}/{config.version}/{endpoint.lstrip('/')}"

    async def get_public_endpoint(self, endpoint: str,
                                  query_params: Optional[Mapping[str, Any]] = None,
                                  config_override: Override = None) -> RestResponse:
        """GET ``{root_url}/{version}/{endpoint}?{query}`` without authentication."""
        config = self._resolve(config_override)
        url = f"{self._endpoint_url(config, endpoint)}?{encode_query(query_params)}"
        request = RequestConfig(
            method="GET",
            url=url,
            headers=dict(config.headers),
            timeout_ms=config.timeout_ms,
        )
        return await self._send(request)

    @abstractmethod
    def _private_request(self, auth: ApiAuth, endpoint: str,
                         data: Optional[Mapping[str, Any]],
                         config_override: Override) -> RequestConfig:
        """Build the signed request for an authenticated endpoint."""

    # --- Transport ---

    async def _send(self, request: RequestConfig) -> RestResponse:
        session = await self._get_session()
        timeout = aiohttp.ClientTimeout(total=request.timeout_ms / 1000)
        # Path only: private URLs carry the api key in the query.
        path = request.url.split("?", 1)[0]
        log.debug("REST %s %s", request.method, path)
        try:
            async with session.request(
                request.method,
                URL(request.url, encoded=True),
                headers=request.headers,
                data=request.body,
                timeout=timeout,
            ) as resp:
                body = await resp.read()
                response = RestResponse.from_body(
                    resp.status, resp.headers, body, request.url,
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as err:
            log.error("REST %s %s failed: %r", request.method, path, err)
            raise TransportError(rejection_reason(None, err), cause=err) from err

        if not response.ok:
            reason = rejection_reason(response, None, self.ERROR_FIELD)
            log.error("REST %s %s failed: HTTP %d %s",
                      request.method, path, response.status, reason)
            raise TransportError(reason, response=response)
        return response
