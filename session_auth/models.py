"""Data models for session authentication"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class Credential:
    """Snapshot of the stored credential

    Attributes:
        access_token: Bearer token attached to authenticated calls
        refresh_token: Token used solely to obtain a new access token
        expiry_epoch: Absolute second at which the access token stops being valid
        is_authenticated: True only when an access token is present
    """
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expiry_epoch: Optional[int] = None
    is_authenticated: bool = False

    def __post_init__(self):
        if self.is_authenticated and not self.access_token:
            raise ValueError("An authenticated credential requires an access token")


EMPTY_CREDENTIAL = Credential()


class TokenResponse(BaseModel):
    """Token body returned by the refresh, login and signup endpoints"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    access_token: str = Field(alias="accessToken", min_length=1)
    refresh_token: Optional[str] = Field(default=None, alias="refreshToken")
    expires_in: Optional[float] = Field(default=None, alias="expiresIn", ge=0)


@dataclass
class CallOptions:
    """Per-call options attached to one outbound request

    Attributes:
        retry: This call was already resent once after a refresh attempt
        skip_error_tooltip: Never surface this call's failures to the user
        skip_auth_refresh: Never attach credentials or refresh for this call
    """
    retry: bool = False
    skip_error_tooltip: bool = False
    skip_auth_refresh: bool = False


@dataclass
class PendingCall:
    """A call that hit 401 while a refresh was already running

    ``future`` resolves to the new access token once the refresh succeeds,
    or raises the refresh error when it fails.
    """
    request: Any
    options: CallOptions
    future: "asyncio.Future[str]" = field(repr=False)
