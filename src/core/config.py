"""Client configuration: built-in defaults, layered overrides, YAML files
and credentials from the environment.

Resolution order, lowest to highest precedence::

    built-in defaults < client override < per-call override < computed fields

Computed fields (url, signed headers, body) are applied by the dispatcher
after ``resolve_config`` has produced the effective ``ClientConfig``.
"""
from __future__ import annotations
import dataclasses
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from dotenv import load_dotenv

from core.errors import ConfigError
from core.types import ApiAuth

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ClientConfig:
    root_url: str
    version: str
    timeout_ms: int
    headers: Dict[str, str] = field(default_factory=dict)


Override = Union[ClientConfig, Mapping[str, Any], None]

_FIELDS = {"root_url", "version", "timeout_ms", "headers"}

GEMINI_DEFAULTS = ClientConfig(
    root_url="https://api.gemini.com",
    version="v1",
    timeout_ms=10000,
    headers={
        "Cache-Control": "no-cache",
        "Content-Length": "0",
        "Content-Type": "text/plain",
        "User-Agent": "Gemini API Client (exchange-gateway)",
    },
)

BITTREX_DEFAULTS = ClientConfig(
    root_url="https://bittrex.com/api",
    version="v1.1",
    timeout_ms=3000,
    headers={
        "User-Agent": "Bittrex API Client (exchange-gateway)",
    },
)

DEFAULTS: Dict[str, ClientConfig] = {
    "gemini": GEMINI_DEFAULTS,
    "bittrex": BITTREX_DEFAULTS,
}


def _as_mapping(override: Override) -> Mapping[str, Any]:
    if override is None:
        return {}
    if isinstance(override, ClientConfig):
        return dataclasses.asdict(override)
    if not isinstance(override, Mapping):
        raise ConfigError(f"Config override must be a mapping, got {type(override).__name__}")
    unknown = set(override) - _FIELDS
    if unknown:
        raise ConfigError(f"Unknown config keys: {sorted(unknown)}")
    headers = override.get("headers")
    if headers is not None and not isinstance(headers, Mapping):
        raise ConfigError(f"headers must be a mapping, got {headers!r}")
    timeout_ms = override.get("timeout_ms")
    if timeout_ms is not None:
        try:
            int(timeout_ms)
        except (TypeError, ValueError):
            raise ConfigError(f"timeout_ms must be an integer, got {timeout_ms!r}") from None
    return override


def resolve_config(base: ClientConfig, *overrides: Override) -> ClientConfig:
    """Overlay ``overrides`` on ``base``; later overrides win.

    Scalar fields are replaced, ``headers`` are merged key by key.
    """
    values: Dict[str, Any] = {
        "root_url": base.root_url,
        "version": base.version,
        "timeout_ms": base.timeout_ms,
        "headers": dict(base.headers),
    }
    for override in overrides:
        for key, value in _as_mapping(override).items():
            if value is None:
                continue
            if key == "headers":
                values["headers"].update({str(k): str(v) for k, v in value.items()})
            elif key == "timeout_ms":
                values["timeout_ms"] = int(value)
            else:
                values[key] = str(value).rstrip("/") if key == "root_url" else str(value)
    return ClientConfig(**values)


def load_config(path: str) -> Dict[str, Dict[str, Any]]:
    """Load per-exchange overrides from a YAML file.

    Expected shape::

        gemini:
          timeout_ms: 5000
        bittrex:
          headers:
            User-Agent: my-bot
    """
    with open(path, "r") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: expected a mapping of exchange name to overrides")
    result: Dict[str, Dict[str, Any]] = {}
    for name, override in raw.items():
        name = str(name).lower()
        if name not in DEFAULTS:
            raise ConfigError(f"{path}: unknown exchange {name!r}")
        override = override or {}
        if not isinstance(override, dict):
            raise ConfigError(f"{path}: overrides for {name!r} must be a mapping")
        _as_mapping(override)
        result[name] = override
    log.debug("Loaded config overrides for %s from %s", sorted(result), path)
    return result


def auth_from_env(exchange: str, dotenv_path: Optional[str] = None) -> Optional[ApiAuth]:
    """Read ``<EXCHANGE>_API_KEY`` / ``<EXCHANGE>_API_SECRET``, loading a .env file first."""
    load_dotenv(dotenv_path)
    prefix = exchange.upper()
    key = os.environ.get(f"{prefix}_API_KEY", "")
    secret = os.environ.get(f"{prefix}_API_SECRET", "")
    if not key or not secret:
        log.debug("No %s credentials in environment", prefix)
        return None
    return ApiAuth(public_key=key, private_key=secret)
