# Role: Provider-neutral contract for completion clients, plus the factory that builds the configured one.
# Input: role-tagged messages. Output: a single reply string, or ChatClientError.

from __future__ import annotations

from typing import Dict, List, Protocol, Sequence

from backend.config import Settings


class ChatClientError(RuntimeError):
    """Raised when the completion provider cannot produce a reply."""


class ChatClient(Protocol):
    model_name: str

    def generate_reply(self, messages: Sequence[Dict[str, str]]) -> str:
        ...


def validate_messages(messages: Sequence[Dict[str, str]]) -> List[Dict[str, str]]:
    if not messages:
        raise ValueError("Messages must be non-empty.")
    if not any(m.get("role") != "system" for m in messages):
        raise ValueError("At least one user or assistant message is required.")
    return [{"role": m["role"], "content": m.get("content") or ""} for m in messages]


def build_chat_client(settings: Settings) -> ChatClient:
    provider = settings.llm_provider

    if provider == "openai":
        from backend.llm.openai_client import OpenAIClient

        return OpenAIClient(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            base_url=settings.openai_base_url,
            timeout=settings.openai_timeout,
            temperature=settings.temperature,
        )

    if provider == "gemini":
        from backend.llm.gemini_client import GeminiClient

        return GeminiClient(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            temperature=settings.temperature,
        )

    raise ValueError(f"Unknown LLM_PROVIDER: {provider!r} (expected openai or gemini)")
