"""
FastAPI dependencies for OAuth endpoints.

Wires the OAuth service with its infrastructure collaborators. Every
provider can be replaced through ``app.dependency_overrides`` in tests.
"""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from tiktok_auth.config import TikTokConfig, get_tiktok_config
from tiktok_auth.core.oauth_service import OAuthService
from tiktok_auth.core.ports import ProviderClient, TokenStore
from tiktok_auth.infrastructure.memory_store import get_token_store
from tiktok_auth.infrastructure.tiktok_client import TikTokClient


logger = logging.getLogger(__name__)


@lru_cache()
def get_tiktok_client(
    config: Annotated[TikTokConfig, Depends(get_tiktok_config)],
) -> TikTokClient:
    """
    Provide the TikTok client dependency.

    Uses lru_cache for singleton behavior - the client is read-only after
    construction, so one instance serves each configuration.
    """
    return TikTokClient(
        client_key=config.client_key,
        client_secret=config.client_secret,
        timeout=config.http_timeout,
    )


def get_store() -> TokenStore:
    """Provide the token store dependency."""
    return get_token_store()


def get_oauth_service(
    config: Annotated[TikTokConfig, Depends(get_tiktok_config)],
    client: Annotated[ProviderClient, Depends(get_tiktok_client)],
    store: Annotated[TokenStore, Depends(get_store)],
) -> OAuthService:
    """Provide the OAuth service wired with its collaborators."""
    return OAuthService(client=client, store=store, scope=config.scope)


# Type aliases for cleaner dependency injection
Config = Annotated[TikTokConfig, Depends(get_tiktok_config)]
Service = Annotated[OAuthService, Depends(get_oauth_service)]
