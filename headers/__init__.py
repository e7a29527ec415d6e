"""HTTP headers and constants package for the session API client"""

from .constants import (
    AUTHORIZATION_HEADER,
    LOCALE_HEADER,
    REFRESH_MARKER_HEADER,
    USER_AGENT,
    DEFAULT_HEADERS,
    SENSITIVE_HEADERS,
    bearer,
)

__all__ = [
    "AUTHORIZATION_HEADER",
    "LOCALE_HEADER",
    "REFRESH_MARKER_HEADER",
    "USER_AGENT",
    "DEFAULT_HEADERS",
    "SENSITIVE_HEADERS",
    "bearer",
]
