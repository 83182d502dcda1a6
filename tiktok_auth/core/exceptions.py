"""
Domain exceptions for the OAuth flow.

These exceptions represent failures of the OAuth pipeline and are caught
by centralized exception handlers in main.py.
"""

from typing import Any


class TikTokAuthError(Exception):
    """Base exception for all OAuth flow errors."""

    pass


class CallbackValidationError(TikTokAuthError):
    """
    Raised when the callback request itself is unusable.

    This indicates a client-side error (provider reported an error,
    code missing, state mismatch) and results in a 400 response carrying
    a machine-readable reason tag. Never retried.
    """

    def __init__(self, reason: str, detail: Any = None):
        super().__init__(reason)
        self.reason = reason
        self.detail = detail


class ExchangeError(TikTokAuthError):
    """
    Raised when exchanging the authorization code for a token fails.

    Covers transport failures, non-2xx responses, undecodable bodies and
    errors reported by TikTok. Results in a 502; the message is logged
    server-side only.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class UserInfoError(TikTokAuthError):
    """
    Raised when fetching the user profile fails.

    Non-fatal for the callback: the token is still returned.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class StoreError(TikTokAuthError):
    """Raised when a token store cannot persist a token."""

    pass


class StateGenerationError(TikTokAuthError):
    """
    Raised when no secure random state can be produced.

    The login request fails closed with a 503 instead of sending a
    predictable state value.
    """

    pass
