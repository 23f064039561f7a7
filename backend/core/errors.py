# Role: Domain exceptions shared by the stores, the chat service and the API layer.
# The API maps each one to a JSON {"error": ...} response.

from __future__ import annotations


class SessionNotFound(LookupError):
    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


class StoreError(RuntimeError):
    """Raised when the session backend cannot be read or written."""
