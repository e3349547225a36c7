"""Tests for jeni.adapters.token_auth — static bearer tokens."""

import pytest

from jeni.adapters.token_auth import StaticTokenAuth


class TestStaticTokenAuth:
    @pytest.mark.asyncio
    async def test_known_token(self):
        auth = StaticTokenAuth({"abc": "user-1", "def": "user-2"})
        assert await auth.resolve_user("def") == "user-2"

    @pytest.mark.asyncio
    async def test_unknown_token(self):
        auth = StaticTokenAuth({"abc": "user-1"})
        assert await auth.resolve_user("abd") is None

    @pytest.mark.asyncio
    async def test_empty_credential(self):
        auth = StaticTokenAuth({"abc": "user-1"})
        assert await auth.resolve_user("") is None

    @pytest.mark.asyncio
    async def test_non_ascii_credential(self):
        auth = StaticTokenAuth({"abc": "user-1"})
        assert await auth.resolve_user("ábc") is None
