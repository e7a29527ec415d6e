"""Wiring of the authenticated client and its collaborators"""

from dataclasses import dataclass
from typing import Optional

import httpx

from settings import (
    API_BASE_URL,
    DEFAULT_LOCALE,
    QUERY_CACHE_MAX_ENTRIES,
    QUERY_STALE_SECONDS,
)
from session_auth.auth_state import AuthState
from session_auth.navigation import Navigator
from session_auth.session import SessionInvalidator
from session_auth.storage import CredentialStore
from session_auth.token_refresh import LocaleSource, RefreshCoordinator
from utils.query_cache import QueryCache
from utils.storage import SecureStorage
from .auth_manager import AuthManager
from .client import AuthenticatedClient
from .notifier import FailureNotifier


@dataclass
class ClientServices:
    """Every component of the authenticated access layer, wired together"""
    store: CredentialStore
    auth_state: AuthState
    cache: QueryCache
    coordinator: RefreshCoordinator
    invalidator: SessionInvalidator
    notifier: FailureNotifier
    client: AuthenticatedClient
    auth: AuthManager

    async def aclose(self):
        await self.client.aclose()


def build_client(
    navigator: Optional[Navigator] = None,
    notifier: Optional[FailureNotifier] = None,
    storage: Optional[SecureStorage] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    base_url: Optional[str] = None,
    locale: LocaleSource = DEFAULT_LOCALE,
) -> ClientServices:
    """Construct the process-wide client

    One coordinator instance is shared by both interceptors, so there is a
    single refresh flag and a single pending queue per process.
    """
    base_url = base_url or API_BASE_URL
    store = CredentialStore(storage)
    auth_state = AuthState(is_authenticated=store.is_authenticated)
    cache = QueryCache(stale_seconds=QUERY_STALE_SECONDS, max_entries=QUERY_CACHE_MAX_ENTRIES)
    notifier = notifier or FailureNotifier()

    invalidator = SessionInvalidator(store, auth_state, cache=cache, navigator=navigator)
    coordinator = RefreshCoordinator(
        store,
        auth_state=auth_state,
        cache=cache,
        base_url=base_url,
        transport=transport,
        locale=locale,
        on_failure=invalidator.on_refresh_failed,
    )
    client = AuthenticatedClient(
        store,
        coordinator,
        base_url=base_url,
        transport=transport,
        invalidator=invalidator,
        notifier=notifier,
        locale=locale,
    )
    auth = AuthManager(client, store, auth_state, invalidator, cache=cache, navigator=navigator)

    return ClientServices(
        store=store,
        auth_state=auth_state,
        cache=cache,
        coordinator=coordinator,
        invalidator=invalidator,
        notifier=notifier,
        client=client,
        auth=auth,
    )
