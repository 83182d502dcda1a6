"""
Core service for handling the TikTok OAuth 2.0 authorization-code flow.
"""

import logging
from typing import Sequence

from tiktok_auth.core.domain import ProfileDocument, Token
from tiktok_auth.core.exceptions import StoreError
from tiktok_auth.core.ports import ProviderClient, TokenStore

logger = logging.getLogger(__name__)


class OAuthService:
    """
    Application service sequencing the OAuth flow.

    Composes a provider client and a token store. Holds no state of its
    own beyond the injected collaborators and the configured scope.
    """

    def __init__(self, client: ProviderClient, store: TokenStore, scope: str):
        self.client = client
        self.store = store
        self.scope = scope

    def login_url(self, state: str, redirect_uri: str) -> str:
        """Build the URL the user is redirected to for consent."""
        return self.client.auth_url(state, redirect_uri, self.scope)

    async def callback(self, code: str, redirect_uri: str) -> Token:
        """
        Handle the OAuth 2.0 callback: exchange the code and store the token.

        Storing is best-effort. Any save failure is logged and the token is
        still returned.

        Args:
            code: Authorization code from the callback query
            redirect_uri: Same redirect URI used to build the login URL

        Returns:
            The exchanged token

        Raises:
            ExchangeError: If the exchange fails (nothing is stored)
        """
        token = await self.client.exchange(code, redirect_uri)

        try:
            await self.store.save(token)
        except Exception as e:
            logger.warning(
                f"Failed to store token, continuing: {e}",
                exc_info=not isinstance(e, StoreError),
                extra={"extra_fields": {"open_id": token.open_id}},
            )

        return token

    async def get_user_info(
        self, access_token: str, fields: Sequence[str]
    ) -> ProfileDocument:
        """Fetch the user profile for an access token."""
        return await self.client.get_user_info(access_token, fields)
