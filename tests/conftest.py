"""Shared test fixtures."""
import sys
import os
from typing import Any, Dict, List, Optional

import pytest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))


class FakeResponse:
    """Stands in for an aiohttp response inside ``async with``."""

    def __init__(self, status: int = 200, body: bytes = b"{}",
                 headers: Optional[Dict[str, str]] = None):
        self.status = status
        self._body = body
        self.headers = headers or {"Content-Type": "application/json"}

    async def read(self) -> bytes:
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


class FakeSession:
    """Records every request; answers with ``response`` or raises ``error``."""

    def __init__(self, response: Optional[FakeResponse] = None,
                 error: Optional[BaseException] = None):
        self.response = response or FakeResponse()
        self.error = error
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": str(url), **kwargs})
        if self.error is not None:
            raise self.error
        return self.response

    async def close(self):
        self.closed = True

    @property
    def last(self) -> Dict[str, Any]:
        return self.calls[-1]


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def auth():
    from core.types import ApiAuth
    return ApiAuth(public_key="pub-key", private_key="priv-secret")


@pytest.fixture
def gemini(session):
    from gateway.gemini_rest import GeminiREST
    return GeminiREST(session=session)


@pytest.fixture
def bittrex(session):
    from gateway.bittrex_rest import BittrexREST
    return BittrexREST(session=session)
