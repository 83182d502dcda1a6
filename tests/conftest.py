"""
Shared test configuration and fixtures.
"""

import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

# Provide credentials before importing app
with patch.dict(
    os.environ,
    {
        "TIKTOK_CLIENT_KEY": "test-client-key",
        "TIKTOK_CLIENT_SECRET": "test-client-secret",
        "OAUTH_REDIRECT_URI": "http://testserver/auth/callback",
    },
):
    from tiktok_auth.main import app

from tiktok_auth.config import TikTokConfig, get_tiktok_config
from tiktok_auth.core.domain import Token
from tiktok_auth.infrastructure.memory_store import InMemoryTokenStore
from tiktok_auth.infrastructure.tiktok_client import TikTokClient
from tiktok_auth.oauth.dependencies import get_store, get_tiktok_client


REDIRECT_URI = "http://testserver/auth/callback"
AUTHORIZE_URL = "https://www.tiktok.com/v2/auth/authorize/?client_key=test-client-key"


@pytest.fixture
def test_config(tmp_path):
    """Configured TikTok settings with an empty content directory."""
    return TikTokConfig(
        client_key="test-client-key",
        client_secret="test-client-secret",
        redirect_uri=REDIRECT_URI,
        scope="user.info.basic",
        content_dir=str(tmp_path),
    )


@pytest.fixture
def sample_token():
    """Token as returned by a successful exchange."""
    return Token(
        access_token="act.test-access-token",
        refresh_token="rft.test-refresh-token",
        expires_in=86400,
        token_type="Bearer",
        scope="user.info.basic",
        open_id="open-id-123",
    )


@pytest.fixture
def sample_user_info():
    """TikTok v2 user info response."""
    return {
        "data": {
            "user": {
                "open_id": "open-id-123",
                "display_name": "Test Creator",
                "avatar_url": "https://p16-sign.tiktokcdn.com/avatar.jpeg",
            }
        },
        "error": {"code": "ok", "message": "", "log_id": "20240101000000"},
    }


@pytest.fixture
def mock_provider(sample_token, sample_user_info):
    """Provider client with a successful exchange and profile fetch."""
    provider = MagicMock(spec=TikTokClient)
    provider.auth_url.return_value = AUTHORIZE_URL
    provider.exchange = AsyncMock(return_value=sample_token)
    provider.get_user_info = AsyncMock(return_value=sample_user_info)
    return provider


@pytest.fixture
def token_store():
    """Fresh in-memory token store."""
    return InMemoryTokenStore()


@pytest.fixture
def client(test_config, mock_provider, token_store):
    """Test client with config, provider and store overridden."""
    app.dependency_overrides[get_tiktok_config] = lambda: test_config
    app.dependency_overrides[get_tiktok_client] = lambda: mock_provider
    app.dependency_overrides[get_store] = lambda: token_store

    yield TestClient(app)

    app.dependency_overrides.pop(get_tiktok_config, None)
    app.dependency_overrides.pop(get_tiktok_client, None)
    app.dependency_overrides.pop(get_store, None)
