"""User-visible notifications for failed API calls"""

import logging
from typing import Any, Callable, Optional

from rich.console import Console
from rich.markup import escape

from session_auth.errors import ApiError, NetworkError

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred"
SERVER_ERROR_MESSAGE = "Server error - Please try again later"


def _body_message(error: ApiError) -> Optional[str]:
    """Pull a ``message``/``error`` field out of a JSON error body"""
    try:
        data = error.response.json()
    except ValueError:
        text = error.response.text
        return text.strip() or None

    if isinstance(data, dict):
        for field in ("error", "message"):
            if data.get(field):
                return str(data[field])
    if isinstance(data, str) and data:
        return data
    return None


def describe_error(error: Any) -> str:
    """Map an error to the message shown to the user"""
    if not error:
        return UNKNOWN_ERROR_MESSAGE
    if isinstance(error, str):
        return error

    if isinstance(error, NetworkError):
        return f"Network error - Please check your connection ({error.message})"

    if isinstance(error, ApiError) and error.response is not None:
        status = error.response.status_code
        if status == 404:
            return "Resource not found. The requested item does not exist."
        if status == 403:
            return "Permission denied. You do not have access to this resource."
        if status == 401:
            return "Authentication required. Please log in to continue."
        if status == 400:
            return _body_message(error) or "Invalid request. Please check your inputs."
        if status >= 500:
            return SERVER_ERROR_MESSAGE
        return _body_message(error) or error.message

    if isinstance(error, Exception):
        return str(error) or UNKNOWN_ERROR_MESSAGE
    return UNKNOWN_ERROR_MESSAGE


class FailureNotifier:
    """Surfaces transient error notifications

    Whether a call is notified at all is decided by the caller (the per-call
    ``skip_error_tooltip`` option); this class only renders. It never raises.
    """

    def __init__(
        self,
        sink: Optional[Callable[[str], None]] = None,
        console: Optional[Console] = None,
    ):
        """Initialize notifier

        Args:
            sink: Callable receiving the message (defaults to a console line)
            console: Rich console for the default sink
        """
        self.console = console or Console(stderr=True)
        self._sink = sink or self._print

    def _print(self, message: str):
        self.console.print(f"[red][ERROR][/red] {escape(message)}")

    def notify(self, error: Any) -> None:
        try:
            self._sink(describe_error(error))
        except Exception as e:
            logger.error(f"Failed to show error notification: {e}")
