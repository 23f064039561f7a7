"""Provider adapters with the vendor SDK objects replaced by stubs."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from openai import OpenAIError

from backend.config import Settings
from backend.llm.base import ChatClientError, build_chat_client, validate_messages
from backend.llm.gemini_client import GeminiClient
from backend.llm.openai_client import OpenAIClient

HISTORY = [
    {"role": "system", "content": "Be brief."},
    {"role": "user", "content": "hi"},
    {"role": "assistant", "content": "hello"},
    {"role": "user", "content": "how are you?"},
]


class _GeminiModels:
    def __init__(self, text="  fine, thanks  ", error=None):
        self.text = text
        self.error = error
        self.kwargs = None

    def generate_content(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


class _OpenAICompletions:
    def __init__(self, content="fine, thanks", error=None):
        self.content = content
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _openai(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


class TestGeminiClient:
    def test_history_is_mapped_to_gemini_roles(self):
        models = _GeminiModels()
        client = GeminiClient(model="gemini-test", temperature=0.2, client=SimpleNamespace(models=models))

        assert client.generate_reply(HISTORY) == "fine, thanks"
        assert models.kwargs["model"] == "gemini-test"
        assert [c["role"] for c in models.kwargs["contents"]] == ["user", "model", "user"]
        assert models.kwargs["contents"][0]["parts"] == [{"text": "hi"}]
        assert models.kwargs["config"] == {"temperature": 0.2, "system_instruction": "Be brief."}

    def test_sdk_errors_are_wrapped(self):
        models = _GeminiModels(error=RuntimeError("quota"))
        client = GeminiClient(client=SimpleNamespace(models=models))
        with pytest.raises(ChatClientError, match="quota"):
            client.generate_reply(HISTORY)

    def test_empty_reply_is_an_error(self):
        client = GeminiClient(client=SimpleNamespace(models=_GeminiModels(text="")))
        with pytest.raises(ChatClientError):
            client.generate_reply(HISTORY)

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        with pytest.raises(ChatClientError, match="GEMINI_API_KEY"):
            GeminiClient()


class TestOpenAIClient:
    def test_messages_are_passed_through(self):
        completions = _OpenAICompletions()
        client = OpenAIClient(model="gpt-4o-mini", client=_openai(completions))

        assert client.generate_reply(HISTORY) == "fine, thanks"
        assert completions.kwargs["model"] == "gpt-4o-mini"
        assert completions.kwargs["messages"] == HISTORY
        assert "temperature" not in completions.kwargs

    def test_sdk_errors_are_wrapped(self):
        client = OpenAIClient(client=_openai(_OpenAICompletions(error=OpenAIError("rate limited"))))
        with pytest.raises(ChatClientError, match="rate limited"):
            client.generate_reply(HISTORY)

    def test_empty_reply_is_an_error(self):
        client = OpenAIClient(client=_openai(_OpenAICompletions(content="   ")))
        with pytest.raises(ChatClientError):
            client.generate_reply(HISTORY)

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(ChatClientError, match="OPENAI_API_KEY"):
            OpenAIClient()


def test_validate_messages_rejects_empty_and_system_only():
    with pytest.raises(ValueError):
        validate_messages([])
    with pytest.raises(ValueError):
        validate_messages([{"role": "system", "content": "x"}])


def test_build_chat_client_selects_provider():
    client = build_chat_client(Settings(llm_provider="openai", openai_api_key="sk-test", openai_model="m"))
    assert isinstance(client, OpenAIClient)
    assert client.model_name == "m"

    with pytest.raises(ValueError):
        build_chat_client(Settings(llm_provider="unknown"))
