"""
Tests for the in-memory token store.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest

from tiktok_auth.core.domain import Token
from tiktok_auth.infrastructure.memory_store import (
    InMemoryTokenStore,
    get_token_store,
    reset_token_store,
    set_token_store,
)


def make_token(i: int) -> Token:
    return Token(
        access_token=f"access-{i}",
        refresh_token=f"refresh-{i}",
        expires_in=i,
        token_type="Bearer",
        scope="user.info.basic",
        open_id=f"open-{i}",
    )


def assert_consistent(token: Token) -> None:
    """All fields of a stored token must come from the same save."""
    i = token.expires_in
    assert token == make_token(i)


class TestInMemoryTokenStore:
    """Tests for InMemoryTokenStore."""

    @pytest.fixture
    def store(self):
        """Create fresh store for each test."""
        return InMemoryTokenStore()

    def test_empty_store(self, store):
        """Test a new store holds no token."""
        assert store.latest() is None

    @pytest.mark.asyncio
    async def test_save_then_latest(self, store):
        """Test a saved token is returned unchanged."""
        token = make_token(1)

        await store.save(token)

        assert store.latest() == token

    @pytest.mark.asyncio
    async def test_latest_write_wins(self, store):
        """Test a later save replaces the earlier token entirely."""
        await store.save(make_token(1))
        await store.save(Token(access_token="only-access"))

        latest = store.latest()
        assert latest.access_token == "only-access"
        assert latest.refresh_token == ""
        assert latest.open_id == ""

    @pytest.mark.asyncio
    async def test_concurrent_saves_keep_last_completed(self, store):
        """Test concurrent tasks leave the last completed save in the slot."""
        tokens = [make_token(i) for i in range(100)]

        await asyncio.gather(*(store.save(t) for t in tokens))

        assert store.latest() == tokens[-1]

    def test_threaded_saves_never_tear(self, store):
        """Test saves from many threads never leave a mixed token."""

        def save(i: int) -> None:
            asyncio.run(store.save(make_token(i)))
            assert_consistent(store.latest())

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(save, range(200)))

        assert_consistent(store.latest())

        final = make_token(999)
        asyncio.run(store.save(final))
        assert store.latest() == final


class TestTokenStoreSingleton:
    """Tests for the process-wide store accessors."""

    def setup_method(self):
        reset_token_store()

    def teardown_method(self):
        reset_token_store()

    def test_get_returns_same_instance(self):
        """Test repeated calls return one instance."""
        assert get_token_store() is get_token_store()

    def test_set_and_reset(self):
        """Test a custom store can be injected and reset."""
        custom = InMemoryTokenStore()
        set_token_store(custom)

        assert get_token_store() is custom

        reset_token_store()
        assert get_token_store() is not custom
