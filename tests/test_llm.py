"""Tests for jeni.core.llm — provider table and CompletionClient.

All provider calls are mocked; no network access.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from jeni.config import Settings
from jeni.core.llm import CompletionClient, CompletionError


def _groq_client_mock(status_code=200, payload=None, text=""):
    mock_resp = MagicMock()
    mock_resp.status_code = status_code
    mock_resp.text = text
    mock_resp.json.return_value = payload or {}

    mock_client = AsyncMock()
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    mock_client.post = AsyncMock(return_value=mock_resp)
    return mock_client


class TestCompletionClientInit:
    def test_default_model_per_provider(self, settings):
        client = CompletionClient(settings)
        assert client.provider == "groq"
        assert client.model == "llama-3.3-70b-versatile"

    def test_model_override(self):
        client = CompletionClient(Settings(LLM_PROVIDER="openai", LLM_MODEL="gpt-4o"))
        assert client.provider == "openai"
        assert client.model == "gpt-4o"

    def test_provider_case_insensitive(self):
        assert CompletionClient(Settings(LLM_PROVIDER="Anthropic")).provider == "anthropic"

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown LLM_PROVIDER"):
            CompletionClient(Settings(LLM_PROVIDER="nope"))


class TestComplete:
    @pytest.mark.asyncio
    async def test_missing_key_raises_without_call(self):
        fake = AsyncMock(return_value="hi")
        with patch.dict("jeni.core.llm._PROVIDERS", {"groq": (fake, "m")}):
            client = CompletionClient(Settings(LLM_API_KEY=""))
            with pytest.raises(CompletionError, match="LLM_API_KEY"):
                await client.complete("sys", [], "hello")
        fake.assert_not_called()

    @pytest.mark.asyncio
    async def test_history_then_new_message(self, settings):
        fake = AsyncMock(return_value="Namaste!")
        history = [
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "hello"},
        ]
        with patch.dict("jeni.core.llm._PROVIDERS", {"groq": (fake, "m")}):
            client = CompletionClient(settings)
            reply = await client.complete("system prompt", history, "how are you")

        assert reply == "Namaste!"
        api_key, model, system, messages, temperature, max_tokens = fake.call_args.args
        assert api_key == "fake-llm-key-for-tests"
        assert model == "m"
        assert system == "system prompt"
        assert messages == history + [{"role": "user", "content": "how are you"}]
        assert temperature == 0.7
        assert max_tokens == 1500

    @pytest.mark.asyncio
    async def test_provider_exception_wrapped(self, settings):
        fake = AsyncMock(side_effect=RuntimeError("boom"))
        with patch.dict("jeni.core.llm._PROVIDERS", {"groq": (fake, "m")}):
            client = CompletionClient(settings)
            with pytest.raises(CompletionError, match="boom") as exc_info:
                await client.complete("sys", [], "hello")
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_empty_text_gets_placeholder(self, settings):
        fake = AsyncMock(return_value="")
        with patch.dict("jeni.core.llm._PROVIDERS", {"groq": (fake, "m")}):
            client = CompletionClient(settings)
            assert await client.complete("sys", [], "hi") == "Sorry, I could not generate a response."


class TestGroqProvider:
    @pytest.mark.asyncio
    async def test_successful_call(self, settings):
        mock_client = _groq_client_mock(
            payload={"choices": [{"message": {"content": "Bhai, you have ₹20,000 free."}}]},
        )
        with patch("jeni.core.llm.httpx.AsyncClient", return_value=mock_client) as client_cls:
            reply = await CompletionClient(settings).complete("sys", [], "money?")

        assert reply == "Bhai, you have ₹20,000 free."
        client_cls.assert_called_once_with(timeout=None)
        body = mock_client.post.call_args.kwargs["json"]
        assert body["messages"][0] == {"role": "system", "content": "sys"}
        assert body["messages"][-1] == {"role": "user", "content": "money?"}
        headers = mock_client.post.call_args.kwargs["headers"]
        assert headers["Authorization"] == "Bearer fake-llm-key-for-tests"

    @pytest.mark.asyncio
    async def test_non_200_raises(self, settings):
        mock_client = _groq_client_mock(status_code=429, text="rate limited")
        with patch("jeni.core.llm.httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(CompletionError, match="429"):
                await CompletionClient(settings).complete("sys", [], "money?")
