# Role: Single-file JSON backend. The whole collection lives in one list on disk (sessions.json),
# read on every call and rewritten on every change. Good enough for local development and demos.

from __future__ import annotations

import json
import logging
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from backend.core.errors import StoreError
from backend.core.session_store import newest_first
from backend.models.session import ChatSession, SessionSummary

logger = logging.getLogger(__name__)

# Millisecond epoch ids (the UI's id scheme) fall in this window: 2001-09-09 .. 2286-11-20.
_MS_ID_MIN = 10**12
_MS_ID_MAX = 10**13


def date_from_id(session_id: str) -> Optional[datetime]:
    if not session_id.isdigit():
        return None
    value = int(session_id)
    if not (_MS_ID_MIN <= value < _MS_ID_MAX):
        return None
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


class JsonFileSessionStore:
    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    # ----------------------------
    # File helpers
    # ----------------------------
    def _fallback_date(self, session_id: str) -> datetime:
        derived = date_from_id(session_id)
        if derived is not None:
            return derived
        try:
            return datetime.fromtimestamp(self.path.stat().st_mtime, tz=timezone.utc)
        except OSError:
            return datetime.now(timezone.utc)

    def _parse_record(self, record: Dict[str, Any]) -> Optional[ChatSession]:
        if record.get("date"):
            try:
                return ChatSession.model_validate(record)
            except ValidationError:
                pass

        # Older files stored a locale date string (or nothing); rebuild the date and retry once.
        repaired = dict(record)
        repaired["date"] = self._fallback_date(str(record.get("id", "")))
        try:
            return ChatSession.model_validate(repaired)
        except ValidationError as e:
            logger.warning("Skipping malformed session record in %s: %s", self.path, e)
            return None

    def _load(self) -> List[ChatSession]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Error reading or parsing %s: %s", self.path, e)
            return []

        if not isinstance(raw, list):
            logger.error("Expected a list of sessions in %s, got %s", self.path, type(raw).__name__)
            return []

        sessions: List[ChatSession] = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            session = self._parse_record(item)
            if session is not None:
                sessions.append(session)
        return sessions

    def _write(self, sessions: List[ChatSession]) -> None:
        payload = [s.model_dump(mode="json") for s in sessions]
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            if self.path.parent and not self.path.parent.exists():
                self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
            # Key line: atomic swap so a crash mid-write never truncates the history file.
            os.replace(tmp, self.path)
        except OSError as e:
            raise StoreError(f"Failed to write {self.path}: {e}") from e

    # ----------------------------
    # SessionStore
    # ----------------------------
    def list_sessions(self) -> List[SessionSummary]:
        with self._lock:
            sessions = self._load()
        return newest_first([s.summary() for s in sessions])

    def get(self, session_id: str) -> Optional[ChatSession]:
        with self._lock:
            sessions = self._load()
        return next((s for s in sessions if s.id == session_id), None)

    def save(self, session: ChatSession) -> None:
        with self._lock:
            sessions = self._load()
            for i, existing in enumerate(sessions):
                if existing.id == session.id:
                    sessions[i] = session
                    break
            else:
                sessions.append(session)
            self._write(sessions)

    def delete(self, session_id: str) -> bool:
        with self._lock:
            sessions = self._load()
            kept = [s for s in sessions if s.id != session_id]
            if len(kept) == len(sessions):
                return False
            self._write(kept)
            return True

    def ping(self) -> bool:
        target = self.path if self.path.exists() else self.path.parent
        return os.access(target or Path("."), os.W_OK)
