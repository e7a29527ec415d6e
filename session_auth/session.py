"""Session teardown after an unrecoverable authentication failure"""

import logging
from typing import Optional

from settings import SESSION_EXPIRED_MESSAGE
from utils.query_cache import QueryCache
from .auth_state import AuthState
from .errors import RefreshError
from .navigation import Navigator
from .storage import CredentialStore


logger = logging.getLogger(__name__)


class SessionInvalidator:
    """Clears the session and sends the user back to login

    Runs at most once per refresh failure: every path that reports the same
    failure (the refresh task, the call that started it, calls that joined
    it) triggers a single teardown and a single login prompt. A later,
    separate failure prompts again. Calls without a failure attached run at
    most once per session generation.
    """

    def __init__(
        self,
        store: CredentialStore,
        auth_state: AuthState,
        cache: Optional[QueryCache] = None,
        navigator: Optional[Navigator] = None,
    ):
        self.store = store
        self.auth_state = auth_state
        self.cache = cache
        self.navigator = navigator
        self._handled_generation: Optional[int] = None
        self._handled_cause: Optional[RefreshError] = None

    def invalidate(self, reason: Optional[str] = None, cause: Optional[RefreshError] = None) -> bool:
        """Tear the session down and present login

        Args:
            reason: Optional human-readable reason for the login prompt
            cause: The refresh failure that ended the session, if any

        Returns:
            True if the teardown ran, False if it was already handled
        """
        generation = self.auth_state.generation
        if cause is not None:
            if cause is self._handled_cause:
                logger.debug("Refresh failure already handled, skipping")
                return False
        elif self._handled_generation == generation:
            logger.debug("Session already invalidated, skipping")
            return False
        self._handled_cause = cause
        self._handled_generation = generation

        logger.warning(f"Invalidating session{f': {reason}' if reason else ''}")
        self.teardown()

        if self.navigator is not None:
            try:
                self.navigator.navigate_to_login(reason)
            except Exception as e:
                logger.error(f"Failed to present login: {e}")
        return True

    def on_refresh_failed(self, error: RefreshError):
        """Refresh failure hook for ``RefreshCoordinator``"""
        self.invalidate(SESSION_EXPIRED_MESSAGE, cause=error)

    def teardown(self):
        """Clear credentials, auth state and identity-scoped cache data"""
        try:
            self.store.clear()
        except OSError as e:
            logger.error(f"Failed to remove stored credential: {e}")
        self.auth_state.set_unauthenticated()
        if self.cache is not None:
            dropped = self.cache.drop_identity_scoped()
            logger.debug(f"Dropped {dropped} identity-scoped cache entries")
