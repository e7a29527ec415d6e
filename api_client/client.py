"""Authenticated HTTP client"""

import dataclasses
import logging
from typing import Any, Mapping, Optional

import httpx

from headers import DEFAULT_HEADERS
from settings import API_BASE_URL, CONNECT_TIMEOUT, DEFAULT_LOCALE, REQUEST_TIMEOUT
from session_auth.errors import NetworkError, error_for_response
from session_auth.models import CallOptions
from session_auth.session import SessionInvalidator
from session_auth.storage import CredentialStore
from session_auth.token_refresh import LocaleSource, RefreshCoordinator
from .interceptors import RequestInterceptor, ResponseInterceptor
from .logging_utils import log_request, log_response
from .notifier import FailureNotifier
from .params import with_query

logger = logging.getLogger(__name__)


class AuthenticatedClient:
    """HTTP client that attaches credentials and recovers from expired sessions

    Every call runs through the request interceptor, the transport and, on
    failure, the response interceptor. The transport can be swapped (for
    example ``httpx.MockTransport``) without touching the auth logic.
    """

    def __init__(
        self,
        store: CredentialStore,
        coordinator: RefreshCoordinator,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        invalidator: Optional[SessionInvalidator] = None,
        notifier: Optional[FailureNotifier] = None,
        locale: LocaleSource = DEFAULT_LOCALE,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.store = store
        self.coordinator = coordinator
        self.base_url = (base_url or API_BASE_URL).rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            transport=transport,
            timeout=httpx.Timeout(timeout, connect=CONNECT_TIMEOUT),
            headers=DEFAULT_HEADERS,
        )
        self.request_interceptor = RequestInterceptor(store, coordinator, invalidator, locale)
        self.response_interceptor = ResponseInterceptor(coordinator, self.send, invalidator, notifier)

    async def __aenter__(self) -> "AuthenticatedClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        await self._http.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        content: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        options: Optional[CallOptions] = None,
    ) -> httpx.Response:
        """Build and send a call

        Args:
            method: HTTP method
            url: Path relative to the base URL, or an absolute URL
            params: Query parameters (see ``api_client.params``)
            json: JSON body
            content: Raw body
            headers: Extra headers for this call
            options: Per-call options; copied so the caller's object is never mutated

        Returns:
            The successful response

        Raises:
            ApiError: The call failed and could not be recovered
        """
        options = dataclasses.replace(options) if options else CallOptions()
        request = self._http.build_request(
            method,
            with_query(url, params),
            json=json,
            content=content,
            headers=headers,
        )
        return await self.send(request, options)

    async def send(self, request: httpx.Request, options: CallOptions) -> httpx.Response:
        """Run a prepared request through the full interception pipeline"""
        request = await self.request_interceptor.intercept(request, options)
        log_request(request, options)

        try:
            response = await self._http.send(request)
        except httpx.RequestError as e:
            error = NetworkError(str(e) or type(e).__name__, request=request, options=options)
            return await self.response_interceptor.handle_error(error)

        log_response(request, response)
        if response.is_error:
            return await self.response_interceptor.handle_error(
                error_for_response(request, response, options)
            )
        return response

    async def get(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def patch(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("PATCH", url, **kwargs)

    async def delete(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)
