"""Error taxonomy for authenticated API calls"""

import enum
from typing import TYPE_CHECKING, Optional

import httpx

if TYPE_CHECKING:
    from .models import CallOptions


class ApiError(Exception):
    """Base class for failures surfaced to callers of the API client

    Attributes:
        request: The request that failed, when known
        response: The backend response, or None if none was received
        options: Per-call options the request was sent with
    """

    def __init__(
        self,
        message: str,
        request: Optional[httpx.Request] = None,
        response: Optional[httpx.Response] = None,
        options: Optional["CallOptions"] = None,
    ):
        super().__init__(message)
        self.message = message
        self.request = request
        self.response = response
        self.options = options

    @property
    def status_code(self) -> Optional[int]:
        return self.response.status_code if self.response is not None else None


class NetworkError(ApiError):
    """No response reached the client (connection failure, timeout)"""


class AuthError401(ApiError):
    """Backend rejected the call as unauthenticated"""


class ServerError5xx(ApiError):
    """Backend failed with a 5xx status"""


class OtherHttpError(ApiError):
    """Any other non-success status"""


class RefreshErrorKind(str, enum.Enum):
    NO_REFRESH_TOKEN = "no_refresh_token"
    INVALID_RESPONSE = "invalid_response"
    TRANSPORT_FAILURE = "transport_failure"
    REJECTED = "rejected"


class RefreshError(ApiError):
    """The credential refresh failed; the session cannot be recovered"""

    def __init__(
        self,
        kind: RefreshErrorKind,
        message: str,
        request: Optional[httpx.Request] = None,
        response: Optional[httpx.Response] = None,
    ):
        super().__init__(message, request=request, response=response)
        self.kind = kind

    def __repr__(self) -> str:
        return f"RefreshError(kind={self.kind.value!r}, message={self.message!r})"


def error_for_response(
    request: httpx.Request,
    response: httpx.Response,
    options: Optional["CallOptions"] = None,
) -> ApiError:
    """Build the exception matching a non-success response status"""
    status = response.status_code
    message = f"HTTP {status} for {request.method} {request.url}"
    if status == 401:
        return AuthError401(message, request=request, response=response, options=options)
    if status >= 500:
        return ServerError5xx(message, request=request, response=response, options=options)
    return OtherHttpError(message, request=request, response=response, options=options)
