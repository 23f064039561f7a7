# Role: Persisted conversation. One document per session: opaque id, display title, creation date,
# and the ordered list of turns.

from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, Field

from backend.models.message import Message

DEFAULT_TITLE = "New Chat"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ChatSession(BaseModel):
    id: str = Field(min_length=1)
    title: str = DEFAULT_TITLE
    date: datetime = Field(default_factory=utc_now)
    messages: List[Message] = Field(default_factory=list)

    def summary(self) -> "SessionSummary":
        return SessionSummary(id=self.id, title=self.title, date=self.date)


class SessionSummary(BaseModel):
    id: str
    title: str
    date: datetime
