"""
Port definitions (interfaces) for the core domain.

Ports define the contracts between the core domain and external systems.
Infrastructure adapters implement these ports.
"""

from typing import Protocol, Sequence

from tiktok_auth.core.domain import ProfileDocument, Token


class ProviderClient(Protocol):
    """
    Port (interface) for the identity provider.

    Implemented by infrastructure adapters (e.g., TikTokClient). Both I/O
    operations must be safe to call concurrently.
    """

    def auth_url(self, state: str, redirect_uri: str, scope: str) -> str:
        """
        Build the provider's authorization URL.

        Pure string construction; no I/O and no failure mode.
        """
        ...

    async def exchange(self, code: str, redirect_uri: str) -> Token:
        """
        Exchange an authorization code for a token.

        Raises:
            ExchangeError: On transport, status, decoding or provider errors
        """
        ...

    async def get_user_info(
        self, access_token: str, fields: Sequence[str]
    ) -> ProfileDocument:
        """
        Fetch the authenticated user's profile document.

        Raises:
            UserInfoError: On missing token, transport, status or decoding errors
        """
        ...


class TokenStore(Protocol):
    """
    Port (interface) for keeping the most recently obtained token.

    The core treats persistence as best-effort: a StoreError never fails
    the callback.
    """

    async def save(self, token: Token) -> None:
        """
        Save a token.

        Raises:
            StoreError: If the token cannot be stored
        """
        ...
