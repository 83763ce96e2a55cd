from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import orjson
from multidict import CIMultiDict


@dataclass(frozen=True, slots=True)
class ApiAuth:
    public_key: str
    private_key: str

    def __repr__(self) -> str:
        return f"ApiAuth(public_key={self.public_key!r}, private_key='***')"


@dataclass(frozen=True, slots=True)
class GeminiSignature:
    payload: str  # base64 JSON
    digest: str   # hex HMAC-SHA384


@dataclass(frozen=True, slots=True)
class BittrexSignature:
    full_url: str  # request URI + query string
    digest: str    # hex HMAC-SHA512


@dataclass(slots=True)
class RequestConfig:
    """A fully resolved request, ready for the transport."""
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    timeout_ms: int = 10000


@dataclass(slots=True)
class RestResponse:
    status: int
    headers: CIMultiDict = field(default_factory=CIMultiDict)
    data: Any = None
    body: bytes = b""
    url: str = ""

    @classmethod
    def from_body(cls, status: int, headers: Mapping[str, str], body: bytes,
                  url: str = "") -> "RestResponse":
        """Decode JSON bodies, fall back to text. Empty bodies give data=None."""
        data: Any = None
        if body:
            try:
                data = orjson.loads(body)
            except orjson.JSONDecodeError:
                data = body.decode("utf-8", errors="replace")
        return cls(status=status, headers=CIMultiDict(headers), data=data, body=body, url=url)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300
