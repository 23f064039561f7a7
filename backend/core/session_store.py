# Role: Session persistence contract plus the in-memory backend and the factory that picks a backend
# from Settings. Stores own list/get/save/delete of ChatSession documents and nothing else.

from __future__ import annotations

import threading
from typing import Dict, List, Optional, Protocol

from backend.config import Settings
from backend.models.session import ChatSession, SessionSummary


class SessionStore(Protocol):
    def list_sessions(self) -> List[SessionSummary]:
        ...

    def get(self, session_id: str) -> Optional[ChatSession]:
        ...

    def save(self, session: ChatSession) -> None:
        ...

    def delete(self, session_id: str) -> bool:
        ...

    def ping(self) -> bool:
        ...


def newest_first(summaries: List[SessionSummary]) -> List[SessionSummary]:
    return sorted(summaries, key=lambda s: s.date, reverse=True)


class InMemorySessionStore:
    def __init__(self) -> None:
        self._sessions: Dict[str, ChatSession] = {}
        self._lock = threading.Lock()

    def list_sessions(self) -> List[SessionSummary]:
        with self._lock:
            summaries = [s.summary() for s in self._sessions.values()]
        return newest_first(summaries)

    def get(self, session_id: str) -> Optional[ChatSession]:
        # Key line: hand out copies so callers can mutate freely until they save().
        with self._lock:
            session = self._sessions.get(session_id)
            return session.model_copy(deep=True) if session else None

    def save(self, session: ChatSession) -> None:
        with self._lock:
            self._sessions[session.id] = session.model_copy(deep=True)

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def ping(self) -> bool:
        return True


def build_session_store(settings: Settings) -> SessionStore:
    kind = settings.session_store

    if kind == "memory":
        return InMemorySessionStore()

    if kind == "json":
        from backend.core.json_store import JsonFileSessionStore

        return JsonFileSessionStore(settings.sessions_file)

    if kind == "mongo":
        from backend.core.mongo_store import MongoSessionStore

        if not settings.mongo_uri:
            raise RuntimeError("Missing MONGO_URI in environment or .env")
        return MongoSessionStore.from_uri(
            settings.mongo_uri,
            db_name=settings.mongo_db,
            collection_name=settings.mongo_collection,
        )

    raise ValueError(f"Unknown SESSION_STORE: {kind!r} (expected memory, json or mongo)")
