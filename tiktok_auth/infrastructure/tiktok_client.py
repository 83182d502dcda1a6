"""
Client for the TikTok v2 OAuth and user info endpoints.
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Sequence
from urllib.parse import urlencode

import httpx

from tiktok_auth.core.domain import ProfileDocument, Token
from tiktok_auth.core.exceptions import ExchangeError, UserInfoError


logger = logging.getLogger(__name__)

AUTH_ENDPOINT = "https://www.tiktok.com/v2/auth/authorize/"
TOKEN_ENDPOINT = "https://open.tiktokapis.com/v2/oauth/token/"
USER_INFO_URL = "https://open.tiktokapis.com/v2/user/info/"

DEFAULT_TIMEOUT = 10.0

# Response bodies are never read past these sizes
TOKEN_BODY_LIMIT = 1 << 20
USER_INFO_BODY_LIMIT = 2 << 20
ERROR_SNIPPET_LIMIT = 2048


def _truncate(body: bytes, limit: int = ERROR_SNIPPET_LIMIT) -> str:
    text = body[:limit].decode("utf-8", errors="replace")
    if len(body) > limit:
        return text + "..."
    return text


def _as_str(value: Any) -> str:
    """Stringify a JSON scalar; missing values become an empty string."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _as_seconds(value: Any) -> int:
    """
    Normalize expires_in to a non-negative int.

    TikTok sends a number, but floats and numeric strings are accepted too.
    Anything else counts as 0.
    """
    if isinstance(value, bool):
        return 0
    try:
        if isinstance(value, int):
            seconds = value
        elif isinstance(value, float):
            seconds = int(value)
        elif isinstance(value, str):
            try:
                seconds = int(value.strip())
            except ValueError:
                seconds = int(float(value))
        else:
            return 0
    except (ValueError, OverflowError):
        return 0
    return max(seconds, 0)


def _provider_error(payload: Dict[str, Any]) -> str | None:
    """
    Return the provider-reported error, if the payload carries one.

    TikTok reports OAuth errors as ``{"error": "...", "error_description": "..."}``
    and API errors as ``{"error": {"code": "...", "message": "..."}}``
    where ``code == "ok"`` means success.
    """
    error = payload.get("error")

    if isinstance(error, str) and error:
        message = payload.get("message") or payload.get("error_description")
        return f"{error}: {message}" if message else error

    if isinstance(error, dict):
        code = error.get("code")
        if code and code != "ok":
            message = error.get("message")
            return f"{code}: {message}" if message else str(code)

    return None


class TikTokClient:
    """
    A client for TikTok's OAuth 2.0 endpoints.

    Holds only read-only credentials, so a single instance can serve
    concurrent requests. When no httpx client is injected each call opens
    its own AsyncClient.
    """

    def __init__(
        self,
        client_key: str,
        client_secret: str,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._client_key = client_key
        self._client_secret = client_secret
        self._timeout = timeout
        self._http_client = http_client

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            yield client

    async def _fetch(
        self, method: str, url: str, limit: int, **kwargs: Any
    ) -> tuple[int, bytes]:
        """
        Send a request and read at most ``limit`` bytes of the body.

        Returns:
            Status code and (possibly truncated) body

        Raises:
            httpx.HTTPError: On transport failures
        """
        async with self._client() as client:
            async with client.stream(method, url, **kwargs) as response:
                body = bytearray()
                async for chunk in response.aiter_bytes():
                    body.extend(chunk[: limit - len(body)])
                    if len(body) >= limit:
                        break
                return response.status_code, bytes(body)

    def auth_url(self, state: str, redirect_uri: str, scope: str) -> str:
        """
        Build the TikTok v2 authorization URL.

        ``scope`` and ``state`` are left out of the query when empty.
        """
        params = {"client_key": self._client_key, "response_type": "code"}
        if scope:
            params["scope"] = scope
        params["redirect_uri"] = redirect_uri
        if state:
            params["state"] = state
        return f"{AUTH_ENDPOINT}?{urlencode(params)}"

    async def exchange(self, code: str, redirect_uri: str) -> Token:
        """
        Exchange an authorization code for tokens.

        The form body must carry the same redirect_uri as the authorization
        request or TikTok rejects it.

        Args:
            code: Authorization code from the callback
            redirect_uri: Registered redirect URI

        Returns:
            Token built from the response

        Raises:
            ExchangeError: If the request fails or TikTok reports an error
        """
        form = {
            "client_key": self._client_key,
            "client_secret": self._client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": redirect_uri,
        }

        try:
            status_code, body = await self._fetch(
                "POST",
                TOKEN_ENDPOINT,
                TOKEN_BODY_LIMIT,
                data=form,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except httpx.HTTPError as e:
            raise ExchangeError(f"Network error during token exchange: {e}") from e

        if not 200 <= status_code < 300:
            raise ExchangeError(
                f"Token exchange failed: status={status_code} body={_truncate(body)}",
                status_code=status_code,
            )

        try:
            payload = json.loads(body)
        except ValueError as e:
            raise ExchangeError(f"Failed to decode token response: {e}") from e

        if not isinstance(payload, dict):
            raise ExchangeError("Unexpected token response format")

        error = _provider_error(payload)
        if error:
            raise ExchangeError(error, status_code=status_code)

        # TikTok v2 wraps the token in {"data": {...}}; older responses are flat
        data = payload.get("data")
        if data is None:
            data = payload
        elif not isinstance(data, dict):
            raise ExchangeError("Unexpected token response format")

        access_token = _as_str(data.get("access_token"))
        if not access_token:
            raise ExchangeError("Token response has no access_token")

        return Token(
            access_token=access_token,
            refresh_token=_as_str(data.get("refresh_token")),
            expires_in=_as_seconds(data.get("expires_in")),
            token_type=_as_str(data.get("token_type")),
            scope=_as_str(data.get("scope")),
            open_id=_as_str(data.get("open_id")),
        )

    async def get_user_info(
        self, access_token: str, fields: Sequence[str]
    ) -> ProfileDocument:
        """
        Fetch the user info document using a Bearer token.

        Args:
            access_token: Token from a successful exchange
            fields: Profile fields to request (sent comma-joined)

        Returns:
            The decoded JSON document

        Raises:
            UserInfoError: If the token is empty or the request fails
        """
        if not access_token:
            raise UserInfoError("Missing access token")

        params = {"fields": ",".join(fields)} if fields else None

        try:
            status_code, body = await self._fetch(
                "GET",
                USER_INFO_URL,
                USER_INFO_BODY_LIMIT,
                params=params,
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as e:
            raise UserInfoError(f"Network error fetching user info: {e}") from e

        if not 200 <= status_code < 300:
            raise UserInfoError(
                f"User info failed: status={status_code} body={_truncate(body)}",
                status_code=status_code,
            )

        try:
            document = json.loads(body)
        except ValueError as e:
            raise UserInfoError(f"Failed to decode user info: {e}") from e

        if not isinstance(document, dict):
            raise UserInfoError("Unexpected user info format")

        return document
