"""Session authentication package

Credential storage, single-flight refresh and session teardown for the
authenticated API client.
"""

from .errors import (
    ApiError,
    NetworkError,
    AuthError401,
    ServerError5xx,
    OtherHttpError,
    RefreshError,
    RefreshErrorKind,
)
from .models import Credential, CallOptions, PendingCall, TokenResponse
from .storage import CredentialStore
from .auth_state import AuthState
from .token_refresh import RefreshCoordinator
from .session import SessionInvalidator
from .navigation import Navigator, CallbackNavigator
from .jwt_utils import parse_jwt_claims, get_token_expiry

__all__ = [
    "ApiError",
    "NetworkError",
    "AuthError401",
    "ServerError5xx",
    "OtherHttpError",
    "RefreshError",
    "RefreshErrorKind",
    "Credential",
    "CallOptions",
    "PendingCall",
    "TokenResponse",
    "CredentialStore",
    "AuthState",
    "RefreshCoordinator",
    "SessionInvalidator",
    "Navigator",
    "CallbackNavigator",
    "parse_jwt_claims",
    "get_token_expiry",
]
