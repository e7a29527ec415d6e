"""Single-flight credential refresh"""

import asyncio
import logging
import time
from collections import deque
from typing import Callable, Deque, Optional, Tuple, Union

import httpx
from pydantic import ValidationError

from headers import AUTHORIZATION_HEADER, LOCALE_HEADER, REFRESH_MARKER_HEADER, bearer
from settings import (
    API_BASE_URL,
    CONNECT_TIMEOUT,
    DEFAULT_LOCALE,
    REFRESH_PATH,
    REFRESH_SKEW_SECONDS,
    REFRESH_TIMEOUT,
)
from utils.query_cache import QueryCache
from .auth_state import AuthState
from .errors import RefreshError, RefreshErrorKind
from .jwt_utils import get_token_expiry
from .models import CallOptions, Credential, PendingCall, TokenResponse
from .storage import CredentialStore


logger = logging.getLogger(__name__)

LocaleSource = Union[str, Callable[[], str]]


def resolve_locale(locale: LocaleSource) -> str:
    return locale() if callable(locale) else locale


class RefreshCoordinator:
    """Runs at most one credential refresh at a time

    While a refresh is in flight every other caller either joins it
    (``force_refresh``/``refresh_if_needed``) or parks a ``PendingCall`` that
    is settled, in arrival order, when the refresh finishes. The refresh runs
    in its own task and callers await it through ``asyncio.shield``, so a
    cancelled caller never aborts the refresh. ``on_failure`` is called from
    the refresh task itself whenever a refresh fails, so the failure is acted
    on even when no caller is left waiting for it.
    """

    def __init__(
        self,
        store: CredentialStore,
        auth_state: Optional[AuthState] = None,
        cache: Optional[QueryCache] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        locale: LocaleSource = DEFAULT_LOCALE,
        skew_seconds: float = REFRESH_SKEW_SECONDS,
        timeout: float = REFRESH_TIMEOUT,
        clock: Callable[[], float] = time.time,
        on_failure: Optional[Callable[[RefreshError], None]] = None,
    ):
        self.store = store
        self.auth_state = auth_state
        self.cache = cache
        self.base_url = base_url or API_BASE_URL
        self.skew_seconds = skew_seconds
        self.timeout = timeout
        self._transport = transport
        self._locale = locale
        self._clock = clock
        self._on_failure = on_failure
        self._inflight: Optional["asyncio.Task[Credential]"] = None
        self._pending: Deque[PendingCall] = deque()

    @property
    def is_refreshing(self) -> bool:
        return self._inflight is not None

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def pending(self) -> Tuple[PendingCall, ...]:
        """Queued calls in the order they will be settled"""
        return tuple(self._pending)

    def should_proactively_refresh(self) -> bool:
        """Check whether the access token should be refreshed before use

        True when a refresh token exists and the access token expires within
        the skew window. Without a stored expiry the token's JWT ``exp`` claim
        is used; with neither, a missing access token counts as stale.
        """
        credential = self.store.get()
        if not credential.refresh_token:
            return False

        expiry = credential.expiry_epoch
        if expiry is None:
            expiry = get_token_expiry(credential.access_token)
        if expiry is None:
            return not credential.access_token

        return expiry - self._clock() < self.skew_seconds

    def enqueue(self, request: httpx.Request, options: CallOptions) -> PendingCall:
        """Park a call until the in-flight refresh settles"""
        if not self.is_refreshing:
            raise RuntimeError("Cannot queue a call when no refresh is in progress")

        pending = PendingCall(
            request=request,
            options=options,
            future=asyncio.get_running_loop().create_future(),
        )
        self._pending.append(pending)
        logger.debug(f"Queued {request.method} {request.url.path} behind refresh ({len(self._pending)} waiting)")
        return pending

    async def refresh(self) -> Credential:
        """Run the refresh; the caller must have checked ``is_refreshing``

        Returns:
            The newly stored credential

        Raises:
            RefreshError: The refresh failed, queued calls were rejected with it
        """
        if self._inflight is not None:
            raise RuntimeError("A credential refresh is already in progress")

        self._inflight = asyncio.ensure_future(self._run_refresh())
        return await asyncio.shield(self._inflight)

    async def force_refresh(self) -> Credential:
        """Join the in-flight refresh, or start one"""
        if self._inflight is not None:
            return await asyncio.shield(self._inflight)
        return await self.refresh()

    async def refresh_if_needed(self) -> Optional[Credential]:
        """Refresh when the access token is about to expire

        Returns:
            The refreshed credential, or None if no refresh was due
        """
        if not self.should_proactively_refresh():
            return None
        logger.info("Access token close to expiry, refreshing proactively")
        return await self.force_refresh()

    async def _run_refresh(self) -> Credential:
        try:
            credential = await self._perform_refresh()
        except RefreshError as error:
            logger.error(f"Token refresh failed: {error.message}")
            self._fail(error)
            raise
        except asyncio.CancelledError:
            self._fail(RefreshError(RefreshErrorKind.TRANSPORT_FAILURE, "Token refresh was cancelled"))
            raise
        except Exception as e:
            logger.error(f"Token refresh failed with exception: {e}")
            error = RefreshError(RefreshErrorKind.TRANSPORT_FAILURE, f"Token refresh failed: {e}")
            self._fail(error)
            raise error from e
        else:
            self._settle_pending(access_token=credential.access_token)
            return credential
        finally:
            self._inflight = None

    def _fail(self, error: RefreshError):
        """Run the failure hook, then reject every queued call"""
        if self._on_failure is not None:
            try:
                self._on_failure(error)
            except Exception as e:
                logger.error(f"Refresh failure handler raised: {e}")
        self._settle_pending(error=error)

    async def _perform_refresh(self) -> Credential:
        refresh_token = self.store.refresh_token
        if not refresh_token:
            raise RefreshError(RefreshErrorKind.NO_REFRESH_TOKEN, "No refresh token available")

        logger.info("Attempting to refresh access token...")
        tokens = await self._request_tokens(refresh_token)

        credential = self.store.set(
            tokens.access_token,
            tokens.refresh_token or refresh_token,
            tokens.expires_in,
        )
        if self.auth_state is not None:
            self.auth_state.set_authenticated()
        if self.cache is not None:
            self.cache.invalidate_identity_scoped()

        logger.info("Successfully refreshed access token")
        return credential

    async def _request_tokens(self, refresh_token: str) -> TokenResponse:
        """Call the refresh endpoint with the refresh token as bearer credential"""
        headers = {
            "Content-Type": "application/json",
            AUTHORIZATION_HEADER: bearer(refresh_token),
            REFRESH_MARKER_HEADER: "true",
            LOCALE_HEADER: resolve_locale(self._locale),
        }

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                transport=self._transport,
                timeout=httpx.Timeout(self.timeout, connect=CONNECT_TIMEOUT),
            ) as client:
                response = await client.get(REFRESH_PATH, headers=headers)
        except httpx.HTTPError as e:
            raise RefreshError(RefreshErrorKind.TRANSPORT_FAILURE, f"Token refresh request failed: {e}") from e

        if not response.is_success:
            raise RefreshError(
                RefreshErrorKind.REJECTED,
                f"Token refresh failed with status {response.status_code}",
                request=response.request,
                response=response,
            )

        try:
            return TokenResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise RefreshError(
                RefreshErrorKind.INVALID_RESPONSE,
                "Invalid token refresh response",
                request=response.request,
                response=response,
            ) from e

    def _settle_pending(self, access_token: Optional[str] = None, error: Optional[BaseException] = None):
        """Resolve or reject every queued call, oldest first"""
        if self._pending:
            logger.debug(f"Settling {len(self._pending)} queued call(s)")
        while self._pending:
            pending = self._pending.popleft()
            if pending.future.done():
                continue
            if error is not None:
                pending.future.set_exception(error)
            else:
                pending.future.set_result(access_token)
