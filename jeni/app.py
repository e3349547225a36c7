"""Wiring — builds the concrete adapters and the FastAPI app from Settings."""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI

from jeni.adapters.sqlite_store import SQLiteStore
from jeni.adapters.token_auth import StaticTokenAuth
from jeni.api.server import create_app
from jeni.config import Settings, load_settings
from jeni.core.chat_service import ChatService
from jeni.core.llm import CompletionClient

logger = logging.getLogger(__name__)


def build_app(settings: Settings) -> FastAPI:
    """Create the store, auth, completion client and chat service, then the app."""
    store = SQLiteStore(settings.DATABASE_PATH)
    completion = CompletionClient(settings)
    service = ChatService(store, completion, settings)
    auth = StaticTokenAuth(settings.API_TOKENS)
    return create_app(service, auth)


def main() -> None:
    settings = load_settings()
    app = build_app(settings)
    logger.info("Jeni API starting on %s:%d", settings.HOST, settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
