# Role: Thin HTTP adapter for session browsing: sidebar list, one transcript, delete.
# Errors (SessionNotFound/StoreError) are mapped to JSON by the handlers registered in backend.main.

from datetime import datetime
from typing import List, Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from backend.api.deps import get_chat_service
from backend.core.chat_service import ChatService

router = APIRouter(tags=["sessions"])


class SessionSummaryOut(BaseModel):
    id: str
    title: str
    date: datetime


class MessageOut(BaseModel):
    role: str
    sender: Literal["user", "ai"]
    content: str


class DeleteResponse(BaseModel):
    success: bool


@router.get("/sessions", response_model=List[SessionSummaryOut])
def list_sessions(service: ChatService = Depends(get_chat_service)) -> List[SessionSummaryOut]:
    # Newest chats first (the store sorts).
    return [SessionSummaryOut(**s.model_dump()) for s in service.list_sessions()]


@router.get("/sessions/{session_id}", response_model=List[MessageOut])
def get_session_messages(session_id: str, service: ChatService = Depends(get_chat_service)) -> List[MessageOut]:
    return [MessageOut(**m.model_dump()) for m in service.get_messages(session_id)]


@router.delete("/sessions/{session_id}", response_model=DeleteResponse)
def delete_session(session_id: str, service: ChatService = Depends(get_chat_service)) -> DeleteResponse:
    service.delete_session(session_id)
    return DeleteResponse(success=True)
