# Role: Thin HTTP adapter for the chat endpoint. Validates request/response shapes and delegates the entire
# conversation turn to ChatService (business logic lives in core, not in the API layer).

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator

from backend.api.deps import get_chat_service
from backend.core.chat_service import ChatService

router = APIRouter(tags=["chat"])


class SendRequest(BaseModel):
    message: str = Field(..., min_length=1)

    @field_validator("message")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("message must not be blank")
        return v


class SendResponse(BaseModel):
    reply: str


@router.post("/send/{session_id}", response_model=SendResponse)
def send(session_id: str, req: SendRequest, service: ChatService = Depends(get_chat_service)) -> SendResponse:
    # 1) Forward (session_id, message) to the orchestrator
    # 2) Return the assistant text in the {reply} shape the UI expects
    result = service.send_message(session_id, req.message)
    return SendResponse(reply=result.reply)
