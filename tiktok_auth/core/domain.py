"""
Core domain models for the TikTok OAuth flow.

These models represent the business domain and are independent of
any infrastructure or delivery mechanism.
"""

from typing import Any, Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field


# Open JSON document returned by the provider's user info endpoint
JSONValue = Union[str, int, float, bool, None, List[Any], Dict[str, Any]]
ProfileDocument = Dict[str, JSONValue]


class Token(BaseModel):
    """
    OAuth2 token obtained from a successful code exchange.

    Immutable once constructed. A newer exchange supersedes it rather than
    updating it in place.
    """

    access_token: str = Field(description="Opaque bearer credential")
    refresh_token: str = Field(default="", description="Opaque refresh credential")
    expires_in: int = Field(default=0, ge=0, description="Lifetime in seconds")
    token_type: str = Field(default="", description="Token type, e.g. Bearer")
    scope: str = Field(default="", description="Granted scopes as sent by TikTok")
    open_id: str = Field(default="", description="Stable TikTok user identifier")

    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON object returned to callers."""
        return self.model_dump(mode="json")


class ProfileSummary(BaseModel):
    """Display fields pulled out of a user info document."""

    avatar_url: str = ""
    display_name: str = ""
    open_id: str = ""


def _find_user(document: ProfileDocument) -> Dict[str, Any]:
    """
    Locate the user object inside a user info document.

    TikTok answers with ``{"data": {"user": {...}}}``; some proxies wrap it
    once more as ``{"data": {"data": {"user": {...}}}}``.
    """
    data = document.get("data")
    if not isinstance(data, dict):
        return {}

    user = data.get("user")
    if isinstance(user, dict):
        return user

    inner = data.get("data")
    if isinstance(inner, dict) and isinstance(inner.get("user"), dict):
        return inner["user"]

    return {}


def extract_profile_summary(document: ProfileDocument | None) -> ProfileSummary:
    """
    Extract avatar URL and display name from a user info document.

    Args:
        document: Raw user info document, or None if the fetch failed

    Returns:
        ProfileSummary with empty strings for anything not present
    """
    if not document:
        return ProfileSummary()

    user = _find_user(document)

    def text(key: str) -> str:
        value = user.get(key)
        return value if isinstance(value, str) else ""

    return ProfileSummary(
        avatar_url=text("avatar_url"),
        display_name=text("display_name"),
        open_id=text("open_id"),
    )
