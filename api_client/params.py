"""Query string serialization matching the backend's expectations

Lists are sent as JSON (``ids=%5B1%2C2%5D``), empty lists as a literal
``key=[]`` and ``None`` values are dropped.
"""
import json
from typing import Any, Mapping, Optional
from urllib.parse import quote

# Characters encodeURIComponent leaves alone
_SAFE = "-_.!~*'()"


def _encode(value: str) -> str:
    return quote(value, safe=_SAFE)


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def serialize_params(params: Optional[Mapping[str, Any]]) -> str:
    if not params:
        return ""

    parts = []
    for key, value in params.items():
        if isinstance(value, (list, tuple)) and not value:
            parts.append(f"{_encode(key)}=[]")
        elif isinstance(value, (list, tuple)):
            encoded = json.dumps(list(value), separators=(",", ":"))
            parts.append(f"{_encode(key)}={_encode(encoded)}")
        elif value is not None:
            parts.append(f"{_encode(key)}={_encode(_stringify(value))}")
    return "&".join(parts)


def with_query(url: str, params: Optional[Mapping[str, Any]]) -> str:
    """Append serialized params to a URL"""
    query = serialize_params(params)
    if not query:
        return url
    return f"{url}{'&' if '?' in url else '?'}{query}"
