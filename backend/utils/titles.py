# Role: Display-title derivation for the session sidebar. Uses the first user turn, truncated.

from __future__ import annotations

from typing import Sequence

from backend.models.message import Message
from backend.models.session import DEFAULT_TITLE

ELLIPSIS = "..."


def generate_title(messages: Sequence[Message], max_length: int = 30) -> str:
    first = next((m.content for m in messages if m.role == "user"), None)
    if not first:
        return DEFAULT_TITLE

    max_length = max(max_length, 1)
    title = first[:max_length]
    if len(first) > max_length:
        title += ELLIPSIS
    return title
