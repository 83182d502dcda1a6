"""
Tests for core domain models.
"""

import pytest
from pydantic import ValidationError

from tiktok_auth.core.domain import Token, extract_profile_summary


class TestToken:
    """Tests for the Token model."""

    def test_defaults(self):
        """Test only access_token is required."""
        token = Token(access_token="a")

        assert token.refresh_token == ""
        assert token.expires_in == 0
        assert token.token_type == ""
        assert token.scope == ""
        assert token.open_id == ""

    def test_is_immutable(self):
        """Test fields cannot be changed after construction."""
        token = Token(access_token="a")

        with pytest.raises(ValidationError):
            token.access_token = "b"

    def test_negative_expires_in_rejected(self):
        """Test expires_in must not be negative."""
        with pytest.raises(ValidationError):
            Token(access_token="a", expires_in=-1)

    def test_to_dict(self):
        """Test the JSON representation carries all six fields."""
        token = Token(
            access_token="a",
            refresh_token="r",
            expires_in=3600,
            token_type="Bearer",
            scope="s",
            open_id="o",
        )

        assert token.to_dict() == {
            "access_token": "a",
            "refresh_token": "r",
            "expires_in": 3600,
            "token_type": "Bearer",
            "scope": "s",
            "open_id": "o",
        }


class TestExtractProfileSummary:
    """Tests for pulling display fields out of user info documents."""

    def test_data_user_shape(self):
        """Test the standard data.user shape."""
        document = {
            "data": {
                "user": {
                    "avatar_url": "https://cdn/avatar.jpeg",
                    "display_name": "Creator",
                    "open_id": "o",
                }
            }
        }

        summary = extract_profile_summary(document)

        assert summary.avatar_url == "https://cdn/avatar.jpeg"
        assert summary.display_name == "Creator"
        assert summary.open_id == "o"

    def test_double_wrapped_shape(self):
        """Test the data.data.user shape."""
        document = {
            "data": {
                "data": {
                    "user": {
                        "avatar_url": "https://cdn/nested.jpeg",
                        "display_name": "Nested",
                    }
                }
            }
        }

        summary = extract_profile_summary(document)

        assert summary.avatar_url == "https://cdn/nested.jpeg"
        assert summary.display_name == "Nested"

    @pytest.mark.parametrize(
        "document",
        [
            None,
            {},
            {"data": None},
            {"data": "unexpected"},
            {"data": {"user": "not-an-object"}},
            {"data": {"data": {}}},
        ],
    )
    def test_missing_shapes_yield_empty_strings(self, document):
        """Test unknown or absent shapes give empty fields."""
        summary = extract_profile_summary(document)

        assert summary.avatar_url == ""
        assert summary.display_name == ""

    def test_non_string_values_ignored(self):
        """Test non-string field values are treated as absent."""
        document = {"data": {"user": {"display_name": 42, "avatar_url": None}}}

        summary = extract_profile_summary(document)

        assert summary.display_name == ""
        assert summary.avatar_url == ""
