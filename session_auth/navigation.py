"""Navigation collaborator interface

The client never renders screens itself. When the session ends it asks a
navigator to present the login entry point.
"""
from abc import ABC, abstractmethod
from typing import Callable, Optional


class Navigator(ABC):
    """Abstract navigation collaborator"""

    @abstractmethod
    def navigate_to_login(self, message: Optional[str] = None):
        """Present the login entry point

        Args:
            message: Optional human-readable reason shown with the prompt
        """
        pass

    @abstractmethod
    def navigate_after_login(self, redirect_path: Optional[str] = None):
        """Leave the login flow once the user is signed in

        Args:
            redirect_path: Optional destination, defaults to the profile screen
        """
        pass


class CallbackNavigator(Navigator):
    """Navigator that forwards to plain callables"""

    def __init__(
        self,
        on_login: Callable[[Optional[str]], None],
        on_after_login: Optional[Callable[[Optional[str]], None]] = None,
    ):
        self._on_login = on_login
        self._on_after_login = on_after_login

    def navigate_to_login(self, message: Optional[str] = None):
        self._on_login(message)

    def navigate_after_login(self, redirect_path: Optional[str] = None):
        if self._on_after_login is not None:
            self._on_after_login(redirect_path)
