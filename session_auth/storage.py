"""Durable credential storage"""

import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

from utils.storage import SecureStorage
from .models import Credential, EMPTY_CREDENTIAL


logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "access_token"
REFRESH_TOKEN_KEY = "refresh_token"
EXPIRY_EPOCH_KEY = "expiry_epoch"


def _stored_values(credential: Credential) -> Dict[str, Optional[str]]:
    expiry = credential.expiry_epoch
    return {
        ACCESS_TOKEN_KEY: credential.access_token,
        REFRESH_TOKEN_KEY: credential.refresh_token,
        EXPIRY_EPOCH_KEY: str(expiry) if expiry is not None else None,
    }


class CredentialStore:
    """Holds the current credential in memory and in encrypted storage

    The credential is loaded once at construction. Every ``set``/``clear``
    writes storage first and then swaps the in-memory snapshot in a single
    assignment, so readers always see either the old or the new credential.
    A ``set`` that fails part way restores the keys it already wrote.
    """

    def __init__(
        self,
        storage: Optional[SecureStorage] = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize credential store

        Args:
            storage: Encrypted storage backend (creates default if None)
            clock: Source of the current epoch time in seconds
        """
        self.storage = storage or SecureStorage()
        self._clock = clock
        self._lock = threading.Lock()
        self._credential = self.load()

    def load(self) -> Credential:
        """Rehydrate the credential from storage"""
        access_token = self.storage.get_item(ACCESS_TOKEN_KEY)
        refresh_token = self.storage.get_item(REFRESH_TOKEN_KEY)
        raw_expiry = self.storage.get_item(EXPIRY_EPOCH_KEY)

        expiry_epoch = None
        if raw_expiry:
            try:
                expiry_epoch = int(raw_expiry)
            except ValueError:
                logger.warning(f"Ignoring malformed stored expiry: {raw_expiry!r}")

        if not access_token:
            logger.debug("No stored access token, starting unauthenticated")
            return Credential(refresh_token=refresh_token, expiry_epoch=expiry_epoch)

        logger.debug("Loaded stored credential")
        return Credential(
            access_token=access_token,
            refresh_token=refresh_token,
            expiry_epoch=expiry_epoch,
            is_authenticated=True,
        )

    def get(self) -> Credential:
        return self._credential

    @property
    def access_token(self) -> Optional[str]:
        return self._credential.access_token

    @property
    def refresh_token(self) -> Optional[str]:
        return self._credential.refresh_token

    @property
    def expiry_epoch(self) -> Optional[int]:
        return self._credential.expiry_epoch

    @property
    def is_authenticated(self) -> bool:
        return self._credential.is_authenticated

    def set(
        self,
        access_token: str,
        refresh_token: Optional[str] = None,
        expires_in: Optional[float] = None,
    ) -> Credential:
        """Store a new credential

        Args:
            access_token: New access token (must be non-empty)
            refresh_token: New refresh token; the current one is kept when None
            expires_in: Lifetime in seconds; expiry is left unset when None

        Returns:
            The stored credential
        """
        if not access_token:
            raise ValueError("access_token must be a non-empty string")

        with self._lock:
            refresh_token = refresh_token or self._credential.refresh_token
            expiry_epoch = int(self._clock()) + int(expires_in) if expires_in is not None else None
            credential = Credential(
                access_token=access_token,
                refresh_token=refresh_token,
                expiry_epoch=expiry_epoch,
                is_authenticated=True,
            )

            self._persist(credential)
            self._credential = credential
            return credential

    def _persist(self, credential: Credential):
        """Write all three keys, or restore the ones already written"""
        previous = _stored_values(self._credential)
        written = []
        try:
            for key, value in _stored_values(credential).items():
                written.append(key)
                self._write(key, value)
        except Exception:
            for key in reversed(written):
                try:
                    self._write(key, previous[key])
                except OSError as e:
                    logger.error(f"Failed to restore stored '{key}': {e}")
            raise

    def _write(self, key: str, value: Optional[str]):
        if value is None:
            self.storage.delete_item(key)
        else:
            self.storage.set_item(key, value)

    def clear(self):
        """Forget the credential in memory and in storage"""
        with self._lock:
            try:
                for key in (ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, EXPIRY_EPOCH_KEY):
                    self.storage.delete_item(key)
            finally:
                self._credential = EMPTY_CREDENTIAL
        logger.info("Cleared stored credential")

    def get_status(self) -> Dict[str, Any]:
        """Get credential status without exposing secrets"""
        credential = self._credential
        if not credential.access_token:
            return {
                "has_tokens": False,
                "has_refresh_token": bool(credential.refresh_token),
                "is_expired": True,
                "expires_at": None,
                "time_until_expiry": "No tokens",
            }

        if credential.expiry_epoch is None:
            return {
                "has_tokens": True,
                "has_refresh_token": bool(credential.refresh_token),
                "is_expired": False,
                "expires_at": None,
                "time_until_expiry": "Unknown",
            }

        from datetime import datetime
        expires_str = datetime.fromtimestamp(credential.expiry_epoch).isoformat()
        remaining = credential.expiry_epoch - int(self._clock())

        if remaining <= 0:
            minutes_since = (-remaining) // 60
            time_str = f"{minutes_since // 60}h {minutes_since % 60}m ago" if minutes_since >= 60 else f"{minutes_since}m ago"
        else:
            hours = remaining // 3600
            minutes = (remaining % 3600) // 60
            time_str = f"{hours}h {minutes}m" if hours > 0 else f"{minutes}m"

        return {
            "has_tokens": True,
            "has_refresh_token": bool(credential.refresh_token),
            "is_expired": remaining <= 0,
            "expires_at": expires_str,
            "time_until_expiry": time_str,
            "expires_in_seconds": max(remaining, 0),
        }
