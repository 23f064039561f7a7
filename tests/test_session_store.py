"""Tests for the in-memory and JSON-file session stores."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from backend.config import Settings
from backend.core.json_store import JsonFileSessionStore, date_from_id
from backend.core.session_store import InMemorySessionStore, build_session_store
from backend.models.message import Message
from backend.models.session import ChatSession


def _session(session_id: str, minutes_ago: int = 0, title: str = "t") -> ChatSession:
    return ChatSession(
        id=session_id,
        title=title,
        date=datetime(2026, 1, 1, tzinfo=timezone.utc) - timedelta(minutes=minutes_ago),
        messages=[Message(role="user", content="hi"), Message(role="assistant", content="hello")],
    )


@pytest.fixture(params=["memory", "json"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return InMemorySessionStore()
    return JsonFileSessionStore(tmp_path / "sessions.json")


class TestStoreContract:
    def test_empty_store(self, any_store):
        assert any_store.list_sessions() == []
        assert any_store.get("missing") is None
        assert any_store.delete("missing") is False

    def test_save_and_get(self, any_store):
        any_store.save(_session("a", title="First"))
        loaded = any_store.get("a")
        assert loaded is not None
        assert loaded.title == "First"
        assert [m.role for m in loaded.messages] == ["user", "assistant"]
        assert loaded.messages[1].sender == "ai"

    def test_save_is_an_upsert(self, any_store):
        any_store.save(_session("a", title="First"))
        updated = any_store.get("a")
        updated.messages.append(Message(role="user", content="again"))
        any_store.save(updated)

        assert len(any_store.list_sessions()) == 1
        assert len(any_store.get("a").messages) == 3

    def test_list_is_newest_first(self, any_store):
        any_store.save(_session("old", minutes_ago=10))
        any_store.save(_session("newest", minutes_ago=0))
        any_store.save(_session("middle", minutes_ago=5))
        assert [s.id for s in any_store.list_sessions()] == ["newest", "middle", "old"]

    def test_delete(self, any_store):
        any_store.save(_session("a"))
        assert any_store.delete("a") is True
        assert any_store.get("a") is None
        assert any_store.delete("a") is False

    def test_ping(self, any_store):
        assert any_store.ping() is True


def test_memory_store_returns_copies():
    store = InMemorySessionStore()
    store.save(_session("a"))
    loaded = store.get("a")
    loaded.messages.clear()
    assert len(store.get("a").messages) == 2


class TestJsonFileStore:
    def test_file_is_a_pretty_printed_list(self, tmp_path):
        path = tmp_path / "sessions.json"
        JsonFileSessionStore(path).save(_session("a"))
        raw = json.loads(path.read_text(encoding="utf-8"))
        assert isinstance(raw, list)
        assert raw[0]["id"] == "a"
        assert raw[0]["messages"][0] == {"role": "user", "sender": "user", "content": "hi"}
        assert "\n  " in path.read_text(encoding="utf-8")

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "sessions.json"
        path.write_text("{not json", encoding="utf-8")
        assert JsonFileSessionStore(path).list_sessions() == []

    def test_legacy_records_get_a_date_from_their_id(self, tmp_path):
        path = tmp_path / "sessions.json"
        path.write_text(
            json.dumps(
                [
                    {"id": "1700000000000", "title": "Old", "date": "11/14/2023", "messages": []},
                    {"id": "1800000000000", "title": "Newer", "messages": [{"role": "user", "content": "x"}]},
                ]
            ),
            encoding="utf-8",
        )
        store = JsonFileSessionStore(path)
        sessions = store.list_sessions()
        assert [s.id for s in sessions] == ["1800000000000", "1700000000000"]
        assert sessions[1].date == datetime.fromtimestamp(1700000000, tz=timezone.utc)
        assert store.get("1800000000000").messages[0].sender == "user"

    def test_malformed_records_are_skipped(self, tmp_path):
        path = tmp_path / "sessions.json"
        path.write_text(json.dumps([{"title": "no id"}, "junk", {"id": "ok", "title": "fine"}]), encoding="utf-8")
        assert [s.id for s in JsonFileSessionStore(path).list_sessions()] == ["ok"]


def test_date_from_id():
    assert date_from_id("1700000000000") == datetime.fromtimestamp(1700000000, tz=timezone.utc)
    assert date_from_id("abc") is None
    assert date_from_id("42") is None


class TestBuildSessionStore:
    def test_memory(self):
        assert isinstance(build_session_store(Settings(session_store="memory")), InMemorySessionStore)

    def test_json(self, tmp_path):
        store = build_session_store(Settings(session_store="json", sessions_file=str(tmp_path / "s.json")))
        assert isinstance(store, JsonFileSessionStore)

    def test_mongo_requires_uri(self):
        with pytest.raises(RuntimeError, match="MONGO_URI"):
            build_session_store(Settings(session_store="mongo"))

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            build_session_store(Settings(session_store="redis"))
