"""Request and response interception for authenticated calls"""

import logging
from typing import Awaitable, Callable, Optional

import httpx

from headers import AUTHORIZATION_HEADER, LOCALE_HEADER, REFRESH_MARKER_HEADER, bearer
from settings import DEFAULT_LOCALE, REFRESH_PATH, SESSION_EXPIRED_MESSAGE
from session_auth.errors import ApiError, AuthError401, NetworkError, RefreshError
from session_auth.models import CallOptions
from session_auth.session import SessionInvalidator
from session_auth.storage import CredentialStore
from session_auth.token_refresh import LocaleSource, RefreshCoordinator, resolve_locale
from .notifier import FailureNotifier

logger = logging.getLogger(__name__)

SendFn = Callable[[httpx.Request, CallOptions], Awaitable[httpx.Response]]


def is_refresh_call(request: httpx.Request) -> bool:
    """True for calls aimed at the refresh endpoint itself"""
    return request.url.path.endswith(REFRESH_PATH) or REFRESH_MARKER_HEADER in request.headers


class RequestInterceptor:
    """Prepares every outbound call

    Refreshes proactively when the access token is about to expire, attaches
    the bearer credential and the locale header. Calls marked
    ``skip_auth_refresh`` and calls to the refresh endpoint only get the locale.
    """

    def __init__(
        self,
        store: CredentialStore,
        coordinator: RefreshCoordinator,
        invalidator: Optional[SessionInvalidator] = None,
        locale: LocaleSource = DEFAULT_LOCALE,
    ):
        self.store = store
        self.coordinator = coordinator
        self.invalidator = invalidator
        self._locale = locale

    async def intercept(self, request: httpx.Request, options: CallOptions) -> httpx.Request:
        if not (options.skip_auth_refresh or is_refresh_call(request)):
            if not options.retry:
                await self._refresh_if_needed(options)

            access_token = self.store.access_token
            if access_token:
                request.headers[AUTHORIZATION_HEADER] = bearer(access_token)

        request.headers[LOCALE_HEADER] = resolve_locale(self._locale)
        return request

    async def _refresh_if_needed(self, options: CallOptions):
        # A failed proactive refresh does not fail the call; its 401 is surfaced downstream.
        # The session is already gone, so the call is not refreshed again.
        try:
            await self.coordinator.refresh_if_needed()
        except RefreshError as e:
            logger.warning(f"Proactive token refresh failed: {e.message}")
            options.retry = True
            if self.invalidator is not None:
                self.invalidator.invalidate(SESSION_EXPIRED_MESSAGE, cause=e)


class ResponseInterceptor:
    """Handles failed calls

    A 401 triggers exactly one refresh-and-resend per call. The call that
    discovers the 401 runs the refresh itself; calls failing while it runs
    are queued on the coordinator and resent, oldest first, once it settles.
    Everything else is surfaced through the notifier and raised.
    """

    def __init__(
        self,
        coordinator: RefreshCoordinator,
        send: SendFn,
        invalidator: Optional[SessionInvalidator] = None,
        notifier: Optional[FailureNotifier] = None,
    ):
        """Initialize response interceptor

        Args:
            coordinator: Shared refresh coordinator
            send: Pipeline used to resend a call after a refresh
            invalidator: Session teardown run when the refresh fails
            notifier: User-visible error notifications
        """
        self.coordinator = coordinator
        self.invalidator = invalidator
        self.notifier = notifier
        self._send = send

    async def handle_error(self, error: ApiError) -> httpx.Response:
        """Recover from the error or raise it

        Returns:
            The response of the resent call when a refresh recovered it

        Raises:
            ApiError: The original error, or RefreshError when the refresh failed
        """
        options = error.options or CallOptions()

        if isinstance(error, NetworkError):
            logger.error(f"Network error detected: {error.message}")
            self._notify(error, options)
            raise error

        if isinstance(error, AuthError401):
            if options.retry or options.skip_auth_refresh:
                self._notify(error, options)
                raise error

            if self.coordinator.is_refreshing:
                pending = self.coordinator.enqueue(error.request, options)
                access_token = await pending.future
                return await self._resend(error.request, options, access_token)

            options.retry = True
            try:
                credential = await self.coordinator.refresh()
            except RefreshError as refresh_error:
                self._on_refresh_failed(options, refresh_error)
                raise refresh_error from error
            return await self._resend(error.request, options, credential.access_token)

        logger.debug(f"Request failed: {error.message}")
        self._notify(error, options)
        raise error

    async def _resend(self, request: httpx.Request, options: CallOptions, access_token: str) -> httpx.Response:
        options.retry = True
        request.headers[AUTHORIZATION_HEADER] = bearer(access_token)
        return await self._send(request, options)

    def _on_refresh_failed(self, options: CallOptions, error: RefreshError):
        if self.invalidator is not None:
            self.invalidator.invalidate(SESSION_EXPIRED_MESSAGE, cause=error)
        self._notify(SESSION_EXPIRED_MESSAGE, options)

    def _notify(self, error, options: CallOptions):
        if self.notifier is not None and not options.skip_error_tooltip:
            self.notifier.notify(error)
