"""Exception hierarchy for gateway operations.

Every failure a client call can produce surfaces as a ``GatewayError``
subclass raised from the awaited coroutine; nothing is retried here.
"""
from __future__ import annotations
from typing import Any, Optional

UNAUTHENTICATED_MSG = "api keys are required to access private endpoints"


class GatewayError(Exception):
    """Base class for all gateway errors."""


class ConfigError(GatewayError):
    """Invalid client configuration (unknown keys, malformed file)."""


class UnauthenticatedError(GatewayError):
    """Private endpoint called on a client with no API keys."""

    def __init__(self, message: str = UNAUTHENTICATED_MSG):
        super().__init__(message)


class TransportError(GatewayError):
    """Network or HTTP failure.

    ``reason`` holds the normalized rejection value (see ``rejection_reason``),
    which may be a string, a decoded body, a ``RestResponse`` or the raw
    exception.
    """

    def __init__(self, reason: Any, response: Any = None,
                 cause: Optional[BaseException] = None):
        super().__init__(reason)
        self.reason = reason
        self.response = response
        self.cause = cause


def rejection_reason(response: Any = None, error: Any = None,
                     error_field: str = "error") -> Any:
    """Pick the most specific rejection value available.

    Order: structured error field in the body, the body itself, the
    response object, the raw error.
    """
    if response is not None:
        data = getattr(response, "data", None)
        if isinstance(data, dict) and data.get(error_field) is not None:
            return data[error_field]
        if data is not None and data != "":
            return data
        return response
    return error
