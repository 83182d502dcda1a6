"""
TikTok OAuth configuration.

Loaded once from environment variables and shared read-only across requests.
"""

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path


logger = logging.getLogger(__name__)

DEFAULT_SCOPE = "user.info.basic"
DEFAULT_HTTP_TIMEOUT = 10.0
DEFAULT_CONTENT_DIR = str(Path(__file__).parent / "contents")


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class TikTokConfig:
    """
    TikTok OAuth settings.

    ``redirect_uri`` must exactly match the URI registered with TikTok; it
    is sent both in the authorization request and in the token exchange.
    """

    client_key: str = ""
    client_secret: str = field(default="", repr=False)
    redirect_uri: str = ""
    scope: str = DEFAULT_SCOPE
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    # Signed session cookie, only needed when verify_state is on
    session_secret_key: str | None = field(default=None, repr=False)
    verify_state: bool = False

    content_dir: str = DEFAULT_CONTENT_DIR

    @classmethod
    def from_env(cls) -> "TikTokConfig":
        """Load configuration from environment variables."""
        timeout_raw = os.getenv("TIKTOK_HTTP_TIMEOUT", "")
        try:
            http_timeout = float(timeout_raw) if timeout_raw else DEFAULT_HTTP_TIMEOUT
        except ValueError:
            logger.warning(
                f"Invalid TIKTOK_HTTP_TIMEOUT={timeout_raw!r}, "
                f"using {DEFAULT_HTTP_TIMEOUT}s"
            )
            http_timeout = DEFAULT_HTTP_TIMEOUT

        return cls(
            client_key=os.getenv("TIKTOK_CLIENT_KEY", ""),
            client_secret=os.getenv("TIKTOK_CLIENT_SECRET", ""),
            redirect_uri=os.getenv("OAUTH_REDIRECT_URI", ""),
            scope=os.getenv("TIKTOK_SCOPE") or DEFAULT_SCOPE,
            http_timeout=http_timeout,
            session_secret_key=os.getenv("SESSION_SECRET_KEY") or None,
            verify_state=_env_bool("OAUTH_VERIFY_STATE"),
            content_dir=os.getenv("CONTENT_DIR") or DEFAULT_CONTENT_DIR,
        )

    def is_configured(self) -> bool:
        """Check if client credentials and redirect URI are all set."""
        return bool(self.client_key and self.client_secret and self.redirect_uri)

    def missing_settings(self) -> list[str]:
        """List the required environment variables that are not set."""
        missing = []
        if not self.client_key:
            missing.append("TIKTOK_CLIENT_KEY")
        if not self.client_secret:
            missing.append("TIKTOK_CLIENT_SECRET")
        if not self.redirect_uri:
            missing.append("OAUTH_REDIRECT_URI")
        return missing


@lru_cache()
def get_tiktok_config() -> TikTokConfig:
    """Get TikTok configuration singleton."""
    return TikTokConfig.from_env()
