"""
Jeni Life OS — Centralized configuration.

Loads all settings from .env and validates required keys.
Components receive a Settings instance explicitly; nothing below the
entry point reads the environment on its own.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

# Load .env from project root (one level up from jeni/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # LLM: provider-agnostic (groq, openai, anthropic, gemini, cohere)
    LLM_PROVIDER: str = "groq"
    LLM_MODEL: str = ""          # empty → smart default per provider
    LLM_API_KEY: str = ""        # empty → every completion falls back
    LLM_TEMPERATURE: float = 0.7
    LLM_MAX_TOKENS: int = 1500

    # SQLite record store
    DATABASE_PATH: str = "data/jeni.db"

    # Security: bearer token → user id
    API_TOKENS: dict[str, str] = {}

    # Clock used for "today", month-to-date expenses and the prompt timestamp
    TIMEZONE: str = "Asia/Kolkata"

    # Conversation turns replayed to the completion service
    HISTORY_LIMIT: int = 20

    # HTTP server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    @field_validator("API_TOKENS", mode="before")
    @classmethod
    def parse_api_tokens(cls, v: str | dict[str, str]) -> dict[str, str]:
        """Accept "token1:user1,token2:user2" as well as a ready dict."""
        if isinstance(v, dict):
            return v
        tokens: dict[str, str] = {}
        if isinstance(v, str) and v.strip():
            for pair in v.split(","):
                if ":" not in pair:
                    continue
                token, user_id = pair.split(":", 1)
                if token.strip() and user_id.strip():
                    tokens[token.strip()] = user_id.strip()
        return tokens

    @field_validator("LLM_PROVIDER", mode="before")
    @classmethod
    def normalize_provider(cls, v: str) -> str:
        return (v or "groq").strip().lower()

    @field_validator("HISTORY_LIMIT", "PORT", "LLM_MAX_TOKENS", mode="before")
    @classmethod
    def parse_int(cls, v: str | int) -> int:
        return int(v)


def load_settings() -> Settings:
    """Load settings from environment, validating required keys."""
    load_dotenv(_ENV_PATH)

    api_tokens = os.getenv("API_TOKENS", "")
    if not api_tokens or api_tokens.startswith("your-"):
        print("ERROR: API_TOKENS is missing or not set in .env", file=sys.stderr)
        sys.exit(1)

    llm_api_key = os.getenv("LLM_API_KEY", "")
    if llm_api_key.startswith("your-"):
        llm_api_key = ""

    return Settings(
        LLM_PROVIDER=os.getenv("LLM_PROVIDER", "groq"),
        LLM_MODEL=os.getenv("LLM_MODEL", ""),
        LLM_API_KEY=llm_api_key,
        LLM_TEMPERATURE=os.getenv("LLM_TEMPERATURE", "0.7"),
        LLM_MAX_TOKENS=os.getenv("LLM_MAX_TOKENS", "1500"),
        DATABASE_PATH=os.getenv("DATABASE_PATH", "data/jeni.db"),
        API_TOKENS=api_tokens,
        TIMEZONE=os.getenv("TIMEZONE", "Asia/Kolkata"),
        HISTORY_LIMIT=os.getenv("HISTORY_LIMIT", "20"),
        HOST=os.getenv("HOST", "0.0.0.0"),
        PORT=os.getenv("PORT", "8000"),
    )
