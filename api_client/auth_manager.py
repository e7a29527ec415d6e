"""Sign-in, sign-up and sign-out flows"""

import logging
from typing import Any, Dict, Optional, Union

from settings import SOCIAL_CALLBACK_URL
from session_auth.auth_state import AuthState
from session_auth.errors import ApiError, AuthError401, RefreshError
from session_auth.models import TokenResponse
from session_auth.navigation import Navigator
from session_auth.session import SessionInvalidator
from session_auth.storage import CredentialStore
from utils.query_cache import QueryCache
from .client import AuthenticatedClient
from .endpoints import AuthAPI, UserAPI

logger = logging.getLogger(__name__)

USER_CACHE_KEY = ("user", "data")
SOCIAL_PROVIDERS = ("google", "facebook")


class AuthManager:
    """Drives the user-facing authentication flows

    Stores the credential returned by login/signup/token exchange, keeps the
    auth state and the cached user profile current, and tears the session
    down on logout.
    """

    def __init__(
        self,
        client: AuthenticatedClient,
        store: CredentialStore,
        auth_state: AuthState,
        invalidator: SessionInvalidator,
        cache: Optional[QueryCache] = None,
        navigator: Optional[Navigator] = None,
    ):
        self.store = store
        self.auth_state = auth_state
        self.invalidator = invalidator
        self.cache = cache
        self.navigator = navigator
        self.auth_api = AuthAPI(client)
        self.user_api = UserAPI(client)

    def _store_tokens(self, tokens: TokenResponse):
        self.store.set(tokens.access_token, tokens.refresh_token, tokens.expires_in)
        self.auth_state.set_authenticated()

    async def login(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        """Sign in with email and password

        Returns:
            The signed-in user's profile, or None if it could not be fetched
        """
        tokens = await self.auth_api.login(email, password)
        self._store_tokens(tokens)
        logger.info("Logged in")
        return await self.fetch_user()

    async def signup(self, email: str, password: str, first_name: str, last_name: str) -> Optional[Dict[str, Any]]:
        tokens = await self.auth_api.signup(email, password, first_name, last_name)
        self._store_tokens(tokens)
        user = await self.fetch_user()
        await self.user_api.verify_email()
        logger.info("Signed up")
        return user

    async def logout(self):
        """Notify the backend and always clear the local session"""
        try:
            await self.auth_api.logout()
        except ApiError as e:
            logger.warning(f"Logout request failed: {e.message}")
        finally:
            self.invalidator.teardown()
            logger.info("Logged out")

    async def handle_social_login(
        self,
        provider: str,
        token: Optional[str] = None,
    ) -> Union[TokenResponse, Dict[str, str]]:
        """Start or finish a social login

        Without a token, returns the provider's authorization URL and the
        callback URL the app listens on. With the token from that callback,
        exchanges it for a credential and signs in.
        """
        if provider not in SOCIAL_PROVIDERS:
            raise ValueError(f"Unsupported social login provider: {provider}")

        if not token:
            auth_url = (
                self.auth_api.google_login_url()
                if provider == "google"
                else self.auth_api.facebook_login_url()
            )
            return {"auth_url": auth_url, "callback_url": SOCIAL_CALLBACK_URL}

        tokens = await self.auth_api.exchange_token(token)
        self._store_tokens(tokens)
        await self.fetch_user()
        if self.navigator is not None:
            self.navigator.navigate_after_login()
        return tokens

    async def fetch_user(self) -> Optional[Dict[str, Any]]:
        """Load the current user's profile

        An authentication failure marks the session unauthenticated; other
        failures leave the session as it is.
        """
        try:
            user = await self.user_api.get_current_user()
        except (AuthError401, RefreshError) as e:
            logger.warning(f"Could not load user, session rejected: {e.message}")
            self.auth_state.set_unauthenticated()
            return None
        except ApiError as e:
            logger.warning(f"Could not load user: {e.message}")
            return None

        self.auth_state.set_authenticated(user)
        if self.cache is not None:
            self.cache.set(USER_CACHE_KEY, user)
        return user

    async def initialize(self) -> bool:
        """Restore the session from the stored credential at startup"""
        if self.store.is_authenticated or self.store.refresh_token:
            await self.fetch_user()
        return self.auth_state.is_authenticated
