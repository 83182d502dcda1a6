"""
In-memory token store.

Keeps a single slot holding the most recently obtained token. There is no
per-user keying: concurrent callbacks from different users overwrite each
other and the last completed save wins. Data is lost on restart.
"""

import logging
import threading

from tiktok_auth.core.domain import Token
from tiktok_auth.core.ports import TokenStore


logger = logging.getLogger(__name__)


class InMemoryTokenStore(TokenStore):
    """Single-slot, latest-write-wins implementation of TokenStore."""

    def __init__(self):
        self._lock = threading.Lock()
        self._token: Token | None = None

    async def save(self, token: Token) -> None:
        with self._lock:
            self._token = token
        logger.debug("Stored latest token")

    def latest(self) -> Token | None:
        """Return the most recently saved token, if any."""
        with self._lock:
            return self._token


# Singleton instance for dependency injection
_store: InMemoryTokenStore | None = None


def get_token_store() -> InMemoryTokenStore:
    """
    Get the token store singleton.

    Can be overridden via set_token_store for testing.
    """
    global _store
    if _store is None:
        _store = InMemoryTokenStore()
    return _store


def set_token_store(store: InMemoryTokenStore) -> None:
    """Set the token store implementation."""
    global _store
    _store = store


def reset_token_store() -> None:
    """
    Reset the token store singleton.

    Useful for testing to ensure clean state between tests.
    """
    global _store
    _store = None
