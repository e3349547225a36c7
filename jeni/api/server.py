"""
Jeni Life OS — HTTP API.

POST /api/chat is the only conversational entry point. The caller is
identified by a bearer token before anything else runs; unexpected
failures are logged and returned as a generic 500 without detail.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from jeni.core.chat_service import ChatService
from jeni.ports.auth_port import AuthPort

logger = logging.getLogger(__name__)


class ChatRequest(BaseModel):
    message: Optional[str] = None
    sessionId: Optional[str] = None


class ChatReply(BaseModel):
    reply: str
    sessionId: str
    model: str


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _bearer_token(request: Request) -> str:
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def create_app(chat_service: ChatService, auth: AuthPort) -> FastAPI:
    """Build the FastAPI app around already-wired collaborators."""
    app = FastAPI(title="Jeni Life OS API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.post("/api/chat")
    async def chat(request: Request):
        user_id = await auth.resolve_user(_bearer_token(request))
        if user_id is None:
            return _error(401, "Not authenticated")

        try:
            payload = ChatRequest.model_validate(await request.json())
        except (ValueError, ValidationError):
            return _error(400, "Message is required")

        if not payload.message or not payload.message.strip():
            return _error(400, "Message is required")

        try:
            response = await chat_service.handle_message(
                user_id, payload.message, payload.sessionId,
            )
        except Exception:
            logger.exception("Chat API error for user %s", user_id)
            return _error(500, "Something went wrong. Try again.")

        return ChatReply(
            reply=response.reply,
            sessionId=response.session_id,
            model=response.model,
        )

    return app
