"""Static bearer-token auth adapter — implements AuthPort.

Tokens and their user ids come from the API_TOKENS setting.
"""

from __future__ import annotations

import hmac
import logging

logger = logging.getLogger(__name__)


class StaticTokenAuth:
    """Resolves a bearer token against a fixed token → user-id mapping."""

    def __init__(self, tokens: dict[str, str]) -> None:
        self._tokens = dict(tokens)

    async def resolve_user(self, credential: str) -> str | None:
        if not credential:
            return None
        for token, user_id in self._tokens.items():
            if hmac.compare_digest(token.encode(), credential.encode()):
                return user_id
        logger.warning("Unauthorized access attempt with unknown token")
        return None
