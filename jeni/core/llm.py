"""
Jeni Life OS — LLM Provider Abstraction.

``CompletionClient.complete()`` routes to the configured provider.
Provider is selected from Settings.LLM_PROVIDER when the client is built.
Supports: groq (default), openai, anthropic, gemini, cohere.

Every provider receives the same shape: a system prompt, prior turns as
alternating user/assistant messages, and the new user message. Any
provider failure surfaces as CompletionError; there is no retry and no
client-side timeout.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Awaitable, Callable

import httpx

if TYPE_CHECKING:
    from jeni.config import Settings

logger = logging.getLogger(__name__)

Message = dict[str, str]  # {"role": "user" | "assistant", "content": str}

# (api_key, model, system, messages, temperature, max_tokens) -> text
_ProviderFn = Callable[[str, str, str, list[Message], float, int], Awaitable[str]]

_GROQ_URL = "https://api.groq.com/openai/v1/chat/completions"
_EMPTY_REPLY = "Sorry, I could not generate a response."


class CompletionError(Exception):
    """Raised when the completion service is unavailable or rejects a call."""


# ---------------------------------------------------------------------------
# Provider implementations
# ---------------------------------------------------------------------------


async def _complete_groq(
    api_key: str, model: str, system: str, messages: list[Message],
    temperature: float, max_tokens: int,
) -> str:
    async with httpx.AsyncClient(timeout=None) as client:
        resp = await client.post(
            _GROQ_URL,
            json={
                "model": model,
                "messages": [{"role": "system", "content": system}, *messages],
                "temperature": temperature,
                "max_tokens": max_tokens,
            },
            headers={"Authorization": f"Bearer {api_key}"},
        )
        if resp.status_code != 200:
            raise CompletionError(f"Groq API error: {resp.status_code} {resp.text[:200]}")
        data = resp.json()

    choices = data.get("choices") or [{}]
    return (choices[0].get("message") or {}).get("content", "")


async def _complete_openai(
    api_key: str, model: str, system: str, messages: list[Message],
    temperature: float, max_tokens: int,
) -> str:
    from openai import AsyncOpenAI

    client = AsyncOpenAI(api_key=api_key)
    response = await client.chat.completions.create(
        model=model,
        max_tokens=max_tokens,
        temperature=temperature,
        messages=[{"role": "system", "content": system}, *messages],
    )
    return response.choices[0].message.content


async def _complete_anthropic(
    api_key: str, model: str, system: str, messages: list[Message],
    temperature: float, max_tokens: int,
) -> str:
    import anthropic

    client = anthropic.AsyncAnthropic(api_key=api_key)
    response = await client.messages.create(
        model=model,
        max_tokens=max_tokens,
        temperature=temperature,
        system=system,
        messages=messages,
    )
    return response.content[0].text


async def _complete_gemini(
    api_key: str, model: str, system: str, messages: list[Message],
    temperature: float, max_tokens: int,
) -> str:
    import google.generativeai as genai

    genai.configure(api_key=api_key)
    gm = genai.GenerativeModel(
        model_name=model,
        system_instruction=system,
    )
    contents = [
        {"role": "model" if m["role"] == "assistant" else "user", "parts": [m["content"]]}
        for m in messages
    ]
    response = await gm.generate_content_async(
        contents,
        generation_config=genai.types.GenerationConfig(
            max_output_tokens=max_tokens, temperature=temperature,
        ),
    )
    return response.text


async def _complete_cohere(
    api_key: str, model: str, system: str, messages: list[Message],
    temperature: float, max_tokens: int,
) -> str:
    import cohere

    client = cohere.AsyncClientV2(api_key=api_key)
    response = await client.chat(
        model=model,
        max_tokens=max_tokens,
        temperature=temperature,
        messages=[{"role": "system", "content": system}, *messages],
    )
    return response.message.content[0].text


_PROVIDERS: dict[str, tuple[_ProviderFn, str]] = {
    "groq":      (_complete_groq,      "llama-3.3-70b-versatile"),
    "openai":    (_complete_openai,    "gpt-4o-mini"),
    "anthropic": (_complete_anthropic, "claude-haiku-4-5-20251001"),
    "gemini":    (_complete_gemini,    "gemini-2.0-flash"),
    "cohere":    (_complete_cohere,    "command-a-03-2025"),
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


class CompletionClient:
    """Completion service bound to one provider, model and key."""

    def __init__(self, settings: Settings) -> None:
        provider_name = settings.LLM_PROVIDER.lower()
        if provider_name not in _PROVIDERS:
            raise ValueError(
                f"Unknown LLM_PROVIDER={provider_name!r}. "
                f"Supported: {', '.join(_PROVIDERS)}"
            )
        self._provider_fn, default_model = _PROVIDERS[provider_name]
        self.provider = provider_name
        self.model = settings.LLM_MODEL or default_model
        self._api_key = settings.LLM_API_KEY
        self._temperature = settings.LLM_TEMPERATURE
        self._max_tokens = settings.LLM_MAX_TOKENS
        logger.info("LLM provider: %s, model: %s", self.provider, self.model)

    async def complete(
        self, system: str, history: list[Message], user_message: str,
    ) -> str:
        """Send the prompt, prior turns and the new message; return the reply text.

        Raises CompletionError on any failure. Callers decide how to degrade.
        """
        if not self._api_key:
            raise CompletionError(f"LLM_API_KEY not set for provider {self.provider}")

        messages = [*history, {"role": "user", "content": user_message}]
        try:
            text = await self._provider_fn(
                self._api_key, self.model, system, messages,
                self._temperature, self._max_tokens,
            )
        except CompletionError:
            raise
        except Exception as exc:
            raise CompletionError(f"{self.provider} call failed: {exc}") from exc

        return text or _EMPTY_REPLY
