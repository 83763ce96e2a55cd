"""Gateway package — exchange REST clients.

Re-exports the clients and factory so consumers can write::

    from gateway import GeminiREST, BittrexREST, create_rest
"""
from gateway.base import ExchangeREST
from gateway.bittrex_rest import BittrexREST
from gateway.factory import create_rest
from gateway.gemini_rest import GeminiREST

__all__ = [
    "ExchangeREST",
    "GeminiREST",
    "BittrexREST",
    "create_rest",
]
