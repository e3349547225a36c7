"""Auth port — resolves a caller credential to a stable user id."""

from __future__ import annotations

from typing import Protocol


class AuthPort(Protocol):
    """Abstract authentication provider used by the HTTP layer."""

    async def resolve_user(self, credential: str) -> str | None: ...
