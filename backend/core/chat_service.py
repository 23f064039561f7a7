# backend/core/chat_service.py
# Role: Orchestrator for session operations and for one conversation turn. It glues together:
# session persistence, history replay to the completion provider, title derivation, and rollback on failure.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from backend.core.errors import SessionNotFound
from backend.core.session_store import SessionStore
from backend.llm.base import ChatClient, ChatClientError
from backend.models.message import Message, to_provider_messages
from backend.models.session import ChatSession, SessionSummary
from backend.utils.titles import generate_title

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TurnResponse:
    session_id: str
    reply: str
    title: str


class ChatService:
    def __init__(
        self,
        store: SessionStore,
        client: Optional[ChatClient] = None,
        client_factory: Optional[Callable[[], ChatClient]] = None,
        system_prompt: Optional[str] = None,
        max_context_messages: Optional[int] = None,
        title_max_length: int = 30,
    ) -> None:
        # Key line: dependencies are injectable for testing/mocking.
        self.store = store
        # Key line: lazy client, so browsing history works without provider credentials.
        self._client = client
        self._client_factory = client_factory
        self.system_prompt = system_prompt
        self.max_context_messages = max_context_messages
        self.title_max_length = title_max_length

    def _get_client(self) -> ChatClient:
        if self._client is None:
            if self._client_factory is None:
                raise ChatClientError("No completion client configured.")
            self._client = self._client_factory()
        return self._client

    # ----------------------------
    # Session CRUD
    # ----------------------------
    def list_sessions(self) -> List[SessionSummary]:
        return self.store.list_sessions()

    def get_session(self, session_id: str) -> ChatSession:
        session = self.store.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def get_messages(self, session_id: str) -> List[Message]:
        return self.get_session(session_id).messages

    def delete_session(self, session_id: str) -> None:
        if not self.store.delete(session_id):
            raise SessionNotFound(session_id)
        logger.info("Deleted session %s", session_id)

    # ----------------------------
    # Conversation turn
    # ----------------------------
    def _provider_messages(self, session: ChatSession) -> List[Dict[str, str]]:
        # Role: full history by default; optionally the last N turns only.
        history = session.messages
        if self.max_context_messages and self.max_context_messages > 0:
            history = history[-self.max_context_messages :]

        messages = to_provider_messages(history)
        if self.system_prompt:
            messages.insert(0, {"role": "system", "content": self.system_prompt})
        return messages

    def send_message(self, session_id: str, user_message: str) -> TurnResponse:
        # 1) Load the session (or start a new one for a first message)
        # 2) Append the user turn and replay the history to the provider
        # 3) On provider failure: drop the user turn, keep the store untouched, re-raise
        # 4) On success: append the reply, title new sessions, persist
        # Read-call-save is not atomic: two concurrent sends to one session keep only the last save.
        session = self.store.get(session_id)
        is_new_session = session is None
        if session is None:
            session = ChatSession(id=session_id)

        session.messages.append(Message(role="user", sender="user", content=user_message))

        try:
            reply = self._get_client().generate_reply(self._provider_messages(session))
        except (ChatClientError, ValueError) as e:
            # Key line: never persist a user turn without its reply.
            session.messages.pop()
            logger.error("AI request failed for session %s: %s", session_id, e)
            if isinstance(e, ChatClientError):
                raise
            raise ChatClientError(str(e)) from e
        except Exception as e:
            session.messages.pop()
            logger.exception("Unexpected completion client failure for session %s", session_id)
            raise ChatClientError(f"Completion client failed: {e}") from e

        session.messages.append(Message(role="assistant", sender="ai", content=reply))

        if is_new_session:
            session.title = generate_title(session.messages, max_length=self.title_max_length)

        self.store.save(session)
        logger.debug(
            "Session %s: %d turns stored (new=%s, reply_len=%d)",
            session_id,
            len(session.messages),
            is_new_session,
            len(reply),
        )
        return TurnResponse(session_id=session_id, reply=reply, title=session.title)
