"""
Response helpers for the OAuth endpoints.

Callback results are negotiated between JSON and an HTML page rendered
with Jinja2. Errors always use the ``{"message": ..., "detail": ...}`` shape.
"""

from pathlib import Path
from typing import Any

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from fastapi.templating import Jinja2Templates

from tiktok_auth.core.domain import ProfileDocument, Token, extract_profile_summary


TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def error_response(status_code: int, message: str, detail: Any = None) -> JSONResponse:
    """Build a JSON error body; ``detail`` is omitted when empty."""
    content: dict[str, Any] = {"message": message}
    if detail is not None:
        content["detail"] = detail
    return JSONResponse(status_code=status_code, content=content)


def wants_json(request: Request, response_format: str | None = None) -> bool:
    """
    Decide whether the caller asked for JSON.

    True for ``?format=json`` or an Accept header listing
    ``application/json`` or any ``+json`` media type.
    """
    if response_format and response_format.lower() == "json":
        return True

    accept = request.headers.get("accept", "")
    for part in accept.split(","):
        media_type = part.split(";", 1)[0].strip().lower()
        if media_type == "application/json" or media_type.endswith("+json"):
            return True
    return False


def callback_payload(
    token: Token, user_data: ProfileDocument | None, user_error: str | None
) -> dict[str, Any]:
    return {
        "token": token.to_dict(),
        "user": {"data": user_data, "error": user_error},
    }


def render_callback(
    request: Request,
    token: Token,
    user_data: ProfileDocument | None,
    user_error: str | None,
    as_json: bool,
) -> Response:
    """
    Render a successful callback.

    A failed profile fetch still produces a 200 with the token; the
    error is carried alongside an empty profile.
    """
    if as_json:
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=callback_payload(token, user_data, user_error),
        )

    profile = extract_profile_summary(user_data)
    return templates.TemplateResponse(
        request,
        "callback.html",
        {
            "access_token": token.access_token,
            "refresh_token": token.refresh_token,
            "expires_in": token.expires_in,
            "open_id": token.open_id or profile.open_id,
            "scope": token.scope,
            "avatar_url": profile.avatar_url,
            "display_name": profile.display_name,
            "user_error": user_error,
        },
    )
