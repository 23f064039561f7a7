# Role: Composition root for the API. Builds the ChatService once per process from Settings
# (store backend + lazily-built completion client). Tests override get_chat_service.

from __future__ import annotations

from functools import lru_cache

from backend.config import get_settings
from backend.core.chat_service import ChatService
from backend.core.session_store import build_session_store
from backend.llm.base import build_chat_client


@lru_cache(maxsize=1)
def get_chat_service() -> ChatService:
    settings = get_settings()
    return ChatService(
        store=build_session_store(settings),
        client_factory=lambda: build_chat_client(settings),
        system_prompt=settings.system_prompt,
        max_context_messages=settings.max_context_messages,
        title_max_length=settings.title_max_length,
    )
