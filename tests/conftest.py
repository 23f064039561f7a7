"""Shared fixtures: in-memory store, scripted completion client, and an API test client."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import pytest
from fastapi.testclient import TestClient

from backend.core.chat_service import ChatService
from backend.core.session_store import InMemorySessionStore
from backend.llm.base import ChatClientError


class FakeChatClient:
    """Records every call; replies with a fixed text or raises when `fail` is set."""

    model_name = "fake-model"

    def __init__(self, reply: str = "Hello from the assistant", fail: bool = False) -> None:
        self.reply = reply
        self.fail = fail
        self.calls: List[List[Dict[str, str]]] = []

    def generate_reply(self, messages: Sequence[Dict[str, str]]) -> str:
        self.calls.append([dict(m) for m in messages])
        if self.fail:
            raise ChatClientError("provider unavailable")
        return self.reply


@pytest.fixture()
def fake_client() -> FakeChatClient:
    return FakeChatClient()


@pytest.fixture()
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture()
def service(store, fake_client) -> ChatService:
    return ChatService(store=store, client=fake_client)


@pytest.fixture()
def api(service):
    from backend.main import create_app

    with TestClient(create_app(service=service)) as c:
        yield c
