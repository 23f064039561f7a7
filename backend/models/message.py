# Role: Single chat turn schema. Stored inside a ChatSession and relayed to the completion provider
# (role + content). `sender` mirrors role for the UI ("user" bubbles vs "ai" bubbles).

from __future__ import annotations

from typing import Dict, List, Literal, Optional, Sequence

from pydantic import BaseModel, Field, model_validator

Role = Literal["user", "assistant", "system"]
Sender = Literal["user", "ai"]


class Message(BaseModel):
    role: Role
    sender: Optional[Sender] = None
    content: str = Field(default="")

    @model_validator(mode="after")
    def _default_sender(self) -> "Message":
        # Key line: older records may omit sender; derive it from role.
        if self.sender is None:
            self.sender = "ai" if self.role == "assistant" else "user"
        return self


def to_provider_messages(messages: Sequence[Message]) -> List[Dict[str, str]]:
    # Role: compact {role, content} format expected by completion providers.
    return [{"role": m.role, "content": m.content} for m in messages]
