"""Shared utilities package for the session API client"""

from .storage import SecureStorage
from .query_cache import QueryCache, IDENTITY_SCOPED_KEYS

__all__ = [
    "SecureStorage",
    "QueryCache",
    "IDENTITY_SCOPED_KEYS",
]
