"""
Static content endpoints.

Serves the landing page, legal texts required by the TikTok developer
portal, and domain verification (signature) files from the content
directory.
"""

import logging
from pathlib import Path

from fastapi import APIRouter, status
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from tiktok_auth.oauth.dependencies import Config


logger = logging.getLogger(__name__)

router = APIRouter(tags=["content"])

SIGNATURE_DIR = "signature"


def _read_text(content_dir: str, name: str) -> str | None:
    try:
        return (Path(content_dir) / name).read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to read {name}: {e}")
        return None


def _media_type(name: str) -> str:
    lower = name.lower()
    if lower.endswith(".txt"):
        return "text/plain; charset=utf-8"
    if lower.endswith(".html"):
        return "text/html; charset=utf-8"
    return "application/octet-stream"


@router.get("/", response_class=HTMLResponse)
async def index(config: Config) -> Response:
    """Landing page (contents/index.html)."""
    body = _read_text(config.content_dir, "index.html")
    if body is None:
        return PlainTextResponse(
            "index.html not found", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    return HTMLResponse(body)


@router.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@router.get("/healthz", response_class=PlainTextResponse)
async def healthz() -> str:
    """Plain-text liveness probe."""
    return "ok"


@router.get("/terms-of-service", response_class=PlainTextResponse)
async def terms_of_service(config: Config) -> Response:
    """Terms of Service (contents/terms_of_service.txt)."""
    body = _read_text(config.content_dir, "terms_of_service.txt")
    if body is None:
        return PlainTextResponse(
            "terms_of_service.txt not found",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return PlainTextResponse(body)


@router.get("/privacy-policy", response_class=PlainTextResponse)
async def privacy_policy(config: Config) -> Response:
    """Privacy Policy (contents/privacy_policy.txt)."""
    body = _read_text(config.content_dir, "privacy_policy.txt")
    if body is None:
        return PlainTextResponse(
            "privacy_policy.txt not found",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return PlainTextResponse(body)


@router.get("/{filename}")
async def signature_file(filename: str, config: Config) -> Response:
    """
    Serve a file from contents/signature/.

    Used for TikTok URL-prefix verification files. Must be registered
    after every other top-level route.
    """
    if not filename or ".." in filename or "/" in filename or "\\" in filename:
        return PlainTextResponse(
            "invalid filename", status_code=status.HTTP_400_BAD_REQUEST
        )

    path = Path(config.content_dir) / SIGNATURE_DIR / filename
    try:
        body = path.read_bytes()
    except OSError:
        logger.warning(f"File not found in contents: {filename}")
        return PlainTextResponse("file not found", status_code=status.HTTP_404_NOT_FOUND)

    return Response(content=body, media_type=_media_type(filename))
