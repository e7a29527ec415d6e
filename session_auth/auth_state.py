"""Process-wide authentication state"""

import logging
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Listener = Callable[["AuthState"], None]


class AuthState:
    """Tracks whether the client is signed in and who the user is

    ``generation`` increases each time the state turns authenticated, which
    identifies the current session for idempotent teardown.
    """

    def __init__(self, is_authenticated: bool = False):
        self.is_authenticated = is_authenticated
        self.user: Optional[Dict[str, Any]] = None
        self.generation = 1 if is_authenticated else 0
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns an unsubscribe function"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_authenticated(self, user: Optional[Dict[str, Any]] = None):
        if not self.is_authenticated:
            self.generation += 1
            logger.info("Session authenticated")
        self.is_authenticated = True
        if user is not None:
            self.user = user
        self._emit()

    def set_unauthenticated(self):
        if self.is_authenticated:
            logger.info("Session unauthenticated")
        self.is_authenticated = False
        self.user = None
        self._emit()

    def _emit(self):
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(f"Auth state listener failed: {e}")
