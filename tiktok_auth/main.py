"""
FastAPI application for the TikTok OAuth login flow.

This module wires dependencies and configures the application.
Business logic is in tiktok_auth/core, infrastructure in tiktok_auth/infrastructure.
"""

import logging
from contextlib import asynccontextmanager

# Configure logging FIRST, before other local imports
from tiktok_auth.logging_config import setup_global_logging

setup_global_logging()

# Now import other modules (they will use the configured logging)
from fastapi import FastAPI, Request, status  # noqa: E402
from starlette.middleware.sessions import SessionMiddleware  # noqa: E402

from tiktok_auth.api import content  # noqa: E402
from tiktok_auth.config import TikTokConfig, get_tiktok_config  # noqa: E402
from tiktok_auth.core.exceptions import (  # noqa: E402
    CallbackValidationError,
    ExchangeError,
    StateGenerationError,
)
from tiktok_auth.middleware import access_log_middleware  # noqa: E402
from tiktok_auth.oauth import router as oauth_router  # noqa: E402
from tiktok_auth.oauth.responses import error_response  # noqa: E402

logger = logging.getLogger(__name__)


# ============================================================================
# Centralized Exception Handlers
# ============================================================================


async def callback_validation_error_handler(
    request: Request, exc: CallbackValidationError
):
    """
    Handle unusable callback requests (provider error, missing code, bad state).

    Returns 400 with the reason tag so the caller can restart the flow.
    """
    return error_response(status.HTTP_400_BAD_REQUEST, exc.reason, exc.detail)


async def exchange_error_handler(request: Request, exc: ExchangeError):
    """
    Handle token exchange failures.

    Returns 502 Bad Gateway. The provider's answer is logged but never
    echoed to the client.
    """
    logger.error(
        f"Token exchange failed: {exc}",
        extra={"extra_fields": {"provider_status": exc.status_code}},
    )
    return error_response(status.HTTP_502_BAD_GATEWAY, "token_exchange_failed")


async def state_generation_error_handler(request: Request, exc: StateGenerationError):
    """Refuse to start a login without a secure random state."""
    logger.error(f"State generation failed: {exc}", exc_info=True)
    return error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE, "state_generation_failed"
    )


# ============================================================================
# Application Factory
# ============================================================================


def create_app(config: TikTokConfig | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Explicit configuration; when given it also overrides the
            get_tiktok_config dependency. Defaults to the environment.

    Returns:
        Configured application
    """
    settings = config or get_tiktok_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Log configuration state on startup."""
        logger.info("Application starting up...")
        if settings.is_configured():
            logger.info(
                "TikTok OAuth configured",
                extra={
                    "extra_fields": {
                        "redirect_uri": settings.redirect_uri,
                        "scope": settings.scope,
                        "verify_state": settings.verify_state,
                    }
                },
            )
        else:
            logger.warning(
                "TikTok OAuth not configured (missing settings)",
                extra={"extra_fields": {"missing": settings.missing_settings()}},
            )
        yield
        logger.info("Shutting down application...")

    app = FastAPI(
        title="TikTok OAuth Login",
        description="Server-side TikTok OAuth2 authorization-code flow",
        version="1.0.0",
        lifespan=lifespan,
    )

    if config is not None:
        app.dependency_overrides[get_tiktok_config] = lambda: config

    # Session middleware stores the issued state when verification is on
    if settings.verify_state and not settings.session_secret_key:
        raise ValueError("OAUTH_VERIFY_STATE requires SESSION_SECRET_KEY to be set.")
    if settings.session_secret_key:
        app.add_middleware(
            SessionMiddleware,
            secret_key=settings.session_secret_key,
            same_site="lax",
            https_only=settings.redirect_uri.startswith("https"),
        )

    app.middleware("http")(access_log_middleware)

    app.add_exception_handler(CallbackValidationError, callback_validation_error_handler)
    app.add_exception_handler(ExchangeError, exchange_error_handler)
    app.add_exception_handler(StateGenerationError, state_generation_error_handler)

    app.include_router(oauth_router.router)
    # Catch-all /{filename} lives here, so it goes last
    app.include_router(content.router)

    return app


app = create_app()
