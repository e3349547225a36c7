"""
Jeni Life OS — UI-Agnostic Chat Service.

Stateless service layer that handles one inbound message end to end:
route -> (execute command | build snapshot -> prompt -> complete ->
fallback) -> log the turn pair -> return a structured response.

Each UI adapter (the HTTP API today) calls this service and renders the
response in its own way.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Callable
from zoneinfo import ZoneInfo

from jeni.core.commands import Command
from jeni.core.context import build_life_snapshot
from jeni.core.executor import MutationExecutor
from jeni.core.fallback import fallback_reply
from jeni.core.prompt import compile_system_prompt
from jeni.core.router import route
from jeni.data.models import RecordKind
from jeni.ports.store_port import StoreError

if TYPE_CHECKING:
    from jeni.config import Settings
    from jeni.core.llm import CompletionClient, Message
    from jeni.ports.store_port import RecordStore

logger = logging.getLogger(__name__)

DATA_ENGINE_MODEL = "data-engine"
FALLBACK_MODEL = "fallback"


# ---------------------------------------------------------------------------
# Response types
# ---------------------------------------------------------------------------


class ResponseKind(Enum):
    COMMAND = "command"            # matched intent, row written
    USAGE_HINT = "usage_hint"      # matched intent, required field missing
    STORE_ERROR = "store_error"    # matched intent, write failed
    COMPLETION = "completion"      # unmatched, model answered
    FALLBACK = "fallback"          # unmatched, model unavailable


@dataclass
class ChatResponse:
    kind: ResponseKind
    reply: str
    session_id: str
    model: str
    intent: str | None = None


# ---------------------------------------------------------------------------
# ChatService
# ---------------------------------------------------------------------------


class ChatService:
    """Orchestrates routing, execution, generation and conversation logging.

    Returns ChatResponse objects; never talks to a UI directly.
    """

    def __init__(
        self,
        store: RecordStore,
        completion: CompletionClient,
        settings: Settings,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._completion = completion
        self._settings = settings
        self._executor = MutationExecutor(store)
        self._tz = ZoneInfo(settings.TIMEZONE)
        self._clock = clock or (lambda: datetime.now(self._tz))

    async def handle_message(
        self, owner: str, message: str, session_id: str | None = None,
    ) -> ChatResponse:
        """Process one message for ``owner`` and log it with its reply."""
        message = message.strip()
        now = self._clock()
        session = session_id or str(uuid.uuid4())

        match = route(message, now.date())
        if match is not None:
            response = await self._run_command(owner, match, session)
        else:
            response = await self._run_completion(owner, message, session, now)

        await self._log_turns(owner, session, message, response)
        return response

    # ------------------------------------------------------------------
    # Matched path
    # ------------------------------------------------------------------

    async def _run_command(self, owner: str, match, session: str) -> ChatResponse:
        result = await self._executor.execute(owner, match)
        if result.success:
            kind = ResponseKind.COMMAND
        elif isinstance(match.outcome, Command):
            kind = ResponseKind.STORE_ERROR
        else:
            kind = ResponseKind.USAGE_HINT
        return ChatResponse(
            kind=kind,
            reply=result.reply,
            session_id=session,
            model=DATA_ENGINE_MODEL,
            intent=match.intent,
        )

    # ------------------------------------------------------------------
    # Unmatched path
    # ------------------------------------------------------------------

    async def _run_completion(
        self, owner: str, message: str, session: str, now: datetime,
    ) -> ChatResponse:
        snapshot = await build_life_snapshot(self._store, owner, now)
        system_prompt = compile_system_prompt(snapshot)
        history = await self._session_history(owner, session)

        try:
            reply = await self._completion.complete(system_prompt, history, message)
        except Exception as exc:
            logger.error("Completion failed, using fallback: %s", exc)
            return ChatResponse(
                kind=ResponseKind.FALLBACK,
                reply=fallback_reply(message, snapshot),
                session_id=session,
                model=FALLBACK_MODEL,
            )

        return ChatResponse(
            kind=ResponseKind.COMPLETION,
            reply=reply,
            session_id=session,
            model=self._completion.model,
        )

    async def _session_history(self, owner: str, session: str) -> list[Message]:
        """Last HISTORY_LIMIT turns of this session, oldest first."""
        try:
            rows = await self._store.query(
                RecordKind.CHAT,
                owner,
                where={"session_id": session},
                order_by="created_at",
                descending=True,
                limit=self._settings.HISTORY_LIMIT,
            )
        except StoreError as exc:
            logger.warning("Could not load history for session %s: %s", session, exc)
            return []
        return [
            {"role": "assistant" if r["role"] == "assistant" else "user", "content": r["message"]}
            for r in reversed(rows)
        ]

    # ------------------------------------------------------------------
    # Conversation log
    # ------------------------------------------------------------------

    async def _log_turns(
        self, owner: str, session: str, message: str, response: ChatResponse,
    ) -> None:
        """Append the user message and the reply. A failed append keeps the reply."""
        try:
            for role, text in (("user", message), ("assistant", response.reply)):
                await self._store.create(
                    RecordKind.CHAT,
                    owner,
                    {
                        "session_id": session,
                        "role": role,
                        "message": text,
                        "model_used": response.model,
                    },
                )
        except StoreError as exc:
            logger.error("Failed to log turn for session %s: %s", session, exc)
