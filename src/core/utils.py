import time
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Tuple
from urllib.parse import quote


def time_now_ms() -> int:
    return int(time.time() * 1000)


def fmt_float(value: float) -> str:
    """Format a float exactly as written: no scientific notation, no trailing zeros."""
    return format(Decimal(repr(value)).normalize(), "f")


def _scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return fmt_float(value)
    return str(value)


def _flatten(prefix: str, value: Any, out: List[Tuple[str, str]]) -> None:
    if isinstance(value, Mapping):
        for k, v in value.items():
            _flatten(f"{prefix}[{k}]", v, out)
    elif isinstance(value, (list, tuple)):
        for i, v in enumerate(value):
            _flatten(f"{prefix}[{i}]", v, out)
    else:
        out.append((prefix, _scalar(value)))


def encode_query(params: Optional[Mapping[str, Any]]) -> str:
    """Form-encode ``params`` into a query string.

    Keys keep insertion order. Nested mappings become ``a[b]=v`` and
    sequences ``a[0]=v``; ``None`` encodes as an empty value. Everything
    outside the RFC 3986 unreserved set is percent-encoded, so the result
    can be signed and sent verbatim.
    """
    if not params:
        return ""
    pairs: List[Tuple[str, str]] = []
    for key, value in params.items():
        _flatten(str(key), value, pairs)
    return "&".join(f"{quote(k, safe='')}={quote(v, safe='')}" for k, v in pairs)
