"""Factory function for creating exchange-specific REST clients."""
from __future__ import annotations
from typing import Optional

from core.config import Override
from core.types import ApiAuth
from gateway.base import ExchangeREST


def create_rest(
    exchange: str,
    auth: Optional[ApiAuth] = None,
    config: Override = None,
) -> ExchangeREST:
    """Create an exchange REST client.

    Args:
        exchange: "gemini" or "bittrex"
        auth: API keys; omit for a public-only client
        config: Per-client override of the exchange defaults
    """
    exchange = exchange.lower()
    if exchange == "gemini":
        from gateway.gemini_rest import GeminiREST
        return GeminiREST(auth, config)
    elif exchange == "bittrex":
        from gateway.bittrex_rest import BittrexREST
        return BittrexREST(auth, config)
    else:
        raise ValueError(f"Unsupported exchange: {exchange!r}. Use 'gemini' or 'bittrex'.")
