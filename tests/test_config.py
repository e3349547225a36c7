"""Tests for jeni.config — Settings validation and .env loading."""

from unittest.mock import patch

import pytest

from jeni.config import Settings, load_settings


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.LLM_PROVIDER == "groq"
        assert s.LLM_TEMPERATURE == 0.7
        assert s.LLM_MAX_TOKENS == 1500
        assert s.DATABASE_PATH == "data/jeni.db"
        assert s.TIMEZONE == "Asia/Kolkata"
        assert s.HISTORY_LIMIT == 20
        assert s.API_TOKENS == {}

    def test_api_tokens_from_string(self):
        s = Settings(API_TOKENS="abc:user-1, def:user-2,broken,:nobody")
        assert s.API_TOKENS == {"abc": "user-1", "def": "user-2"}

    def test_provider_normalized(self):
        assert Settings(LLM_PROVIDER="  OpenAI ").LLM_PROVIDER == "openai"

    def test_int_fields_from_strings(self):
        s = Settings(HISTORY_LIMIT="5", PORT="9000", LLM_MAX_TOKENS="256")
        assert (s.HISTORY_LIMIT, s.PORT, s.LLM_MAX_TOKENS) == (5, 9000, 256)


class TestLoadSettings:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("API_TOKENS", "tok:rahul")
        monkeypatch.setenv("LLM_PROVIDER", "gemini")
        monkeypatch.setenv("LLM_API_KEY", "real-key")
        monkeypatch.setenv("HISTORY_LIMIT", "8")
        with patch("jeni.config.load_dotenv"):
            s = load_settings()
        assert s.API_TOKENS == {"tok": "rahul"}
        assert s.LLM_PROVIDER == "gemini"
        assert s.LLM_API_KEY == "real-key"
        assert s.HISTORY_LIMIT == 8

    def test_placeholder_llm_key_treated_as_missing(self, monkeypatch):
        monkeypatch.setenv("API_TOKENS", "tok:rahul")
        monkeypatch.setenv("LLM_API_KEY", "your-groq-key-here")
        with patch("jeni.config.load_dotenv"):
            assert load_settings().LLM_API_KEY == ""

    def test_missing_api_tokens_exits(self, monkeypatch):
        monkeypatch.delenv("API_TOKENS", raising=False)
        with patch("jeni.config.load_dotenv"), pytest.raises(SystemExit) as exc_info:
            load_settings()
        assert exc_info.value.code == 1
