"""HTTP header names and static values sent by the client"""

from typing import Dict

AUTHORIZATION_HEADER = "Authorization"

# Locale header attached to every outbound call
LOCALE_HEADER = "x-lang"

# Marks the refresh call so request interception leaves it alone
REFRESH_MARKER_HEADER = "x-refresh"

USER_AGENT = "session-api-client/0.1.0"

DEFAULT_HEADERS: Dict[str, str] = {
    "Content-Type": "application/json",
    "User-Agent": USER_AGENT,
}

# Headers whose values never reach the logs
SENSITIVE_HEADERS = ("authorization", "x-api-key", "api-key", "cookie")


def bearer(token: str) -> str:
    """Format a bearer credential header value"""
    return f"Bearer {token}"
