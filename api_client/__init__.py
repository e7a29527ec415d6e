"""Authenticated API client package"""

from .client import AuthenticatedClient
from .interceptors import RequestInterceptor, ResponseInterceptor
from .notifier import FailureNotifier, describe_error
from .endpoints import AuthAPI, UserAPI
from .auth_manager import AuthManager
from .factory import ClientServices, build_client
from .params import serialize_params

__all__ = [
    "AuthenticatedClient",
    "RequestInterceptor",
    "ResponseInterceptor",
    "FailureNotifier",
    "describe_error",
    "AuthAPI",
    "UserAPI",
    "AuthManager",
    "ClientServices",
    "build_client",
    "serialize_params",
]
