"""
OAuth2 API endpoints.

Provides the API surface for the TikTok authorization-code flow:
- GET /auth/login - Start OAuth flow
- GET /auth/callback - Exchange the code, fetch the profile, show the result
"""

import logging
import secrets
from typing import Annotated

from fastapi import APIRouter, Query, Request, status
from fastapi.responses import RedirectResponse, Response

from tiktok_auth.core.exceptions import (
    CallbackValidationError,
    StateGenerationError,
    UserInfoError,
)
from tiktok_auth.oauth.dependencies import Config, Service
from tiktok_auth.oauth.responses import error_response, render_callback, wants_json


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["oauth"])

USER_INFO_FIELDS = ("open_id", "display_name", "avatar_url")

STATE_NUM_BYTES = 16
STATE_SESSION_KEY = "oauth_state"

# Sent when the OS random source fails and state is not verified
FALLBACK_STATE = "fallbackstateseed".encode().hex()


def generate_state(num_bytes: int = STATE_NUM_BYTES, strict: bool = False) -> str:
    """
    Generate a hex-encoded random state value.

    Without a secure random source the fixed FALLBACK_STATE is returned,
    unless ``strict`` is set.

    Raises:
        StateGenerationError: If the OS has no secure random source and
            ``strict`` is set
    """
    try:
        return secrets.token_bytes(num_bytes).hex()
    except (NotImplementedError, OSError) as e:
        if strict:
            raise StateGenerationError("Secure random source unavailable") from e
        logger.error(f"Secure random source unavailable, using fallback state: {e}")
        return FALLBACK_STATE


@router.get("/login")
async def login(request: Request, config: Config, service: Service) -> Response:
    """
    Start OAuth2 authorization flow.

    Redirects the user to TikTok's authorization page with a fresh random
    state. The state is only remembered (in the signed session cookie)
    when state verification is enabled, and only then does a broken
    random source abort the login.

    Returns:
        302 redirect to TikTok's authorization page
    """
    if not config.is_configured():
        logger.error(
            "TikTok OAuth not configured",
            extra={"extra_fields": {"missing": config.missing_settings()}},
        )
        return error_response(
            status.HTTP_503_SERVICE_UNAVAILABLE, "provider_not_configured"
        )

    state = generate_state(strict=config.verify_state)
    if config.verify_state:
        request.session[STATE_SESSION_KEY] = state

    url = service.login_url(state, config.redirect_uri)

    logger.info("Redirecting to TikTok auth: state_generated")
    return RedirectResponse(url=url, status_code=status.HTTP_302_FOUND)


@router.get("/callback")
async def callback(
    request: Request,
    config: Config,
    service: Service,
    code: Annotated[str, Query(description="Authorization code")] = "",
    error: Annotated[str, Query(description="Error reported by TikTok")] = "",
    error_description: Annotated[str, Query(description="Error details")] = "",
    state: Annotated[str, Query(description="State sent with the login")] = "",
    response_format: Annotated[
        str | None, Query(alias="format", description="Set to 'json' for JSON")
    ] = None,
) -> Response:
    """
    Handle OAuth2 callback from TikTok.

    Exchanges the authorization code for tokens (stored best-effort), then
    fetches the user's profile. A failed profile fetch still returns the
    token together with the error.

    Raises:
        CallbackValidationError: Provider error, missing code or bad state (400)
        ExchangeError: Token exchange failed (502)
    """
    if error:
        logger.error(f"OAuth error on callback: {error}")
        detail = {"error": error}
        if error_description:
            detail["error_description"] = error_description
        raise CallbackValidationError("oauth_error", detail)

    if not code:
        raise CallbackValidationError("missing_code")

    if config.verify_state:
        expected = request.session.pop(STATE_SESSION_KEY, None)
        if not expected or not secrets.compare_digest(
            expected.encode(), state.encode()
        ):
            logger.warning("OAuth callback state mismatch")
            raise CallbackValidationError("invalid_state")

    token = await service.callback(code, config.redirect_uri)

    user_data = None
    user_error = None
    try:
        user_data = await service.get_user_info(token.access_token, USER_INFO_FIELDS)
    except UserInfoError as e:
        logger.error(f"User info fetch failed: {e}")
        user_error = str(e)

    logger.info(
        "OAuth callback completed",
        extra={
            "extra_fields": {
                "open_id": token.open_id,
                "profile_fetched": user_error is None,
            }
        },
    )

    return render_callback(
        request,
        token,
        user_data,
        user_error,
        as_json=wants_json(request, response_format),
    )
