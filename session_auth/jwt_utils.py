"""JWT claim parsing (payload only, no signature verification)"""

import base64
import json
from typing import Any, Dict, Optional


def parse_jwt_claims(token: Optional[str]) -> Optional[Dict[str, Any]]:
    """Parse a JWT and return the claims from its payload

    Args:
        token: JWT token string

    Returns:
        Dictionary of claims, or None if the token is not a parseable JWT
    """
    if not token or token.count(".") != 2:
        return None

    try:
        _, payload, _ = token.split(".")
        padded = payload + "=" * (-len(payload) % 4)
        data = json.loads(base64.urlsafe_b64decode(padded.encode()).decode())
    except (ValueError, UnicodeDecodeError):
        return None

    return data if isinstance(data, dict) else None


def get_token_expiry(token: Optional[str]) -> Optional[int]:
    """Return the ``exp`` claim of a JWT as epoch seconds, if present"""
    claims = parse_jwt_claims(token) or {}
    exp = claims.get("exp")
    if isinstance(exp, (int, float)) and not isinstance(exp, bool):
        return int(exp)
    return None
