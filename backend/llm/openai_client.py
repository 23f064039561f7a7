# Role: OpenAI chat-completions adapter. Sends the full role-tagged history and returns the first choice.

import os
from typing import Any, Dict, Optional, Sequence

from openai import OpenAI, OpenAIError

from backend.llm.base import ChatClientError, validate_messages


class OpenAIClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 60.0,
        temperature: Optional[float] = None,
        client: Optional[Any] = None,
    ) -> None:
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key and client is None:
            raise ChatClientError("Missing OPENAI_API_KEY in environment or .env")

        self.model_name = model or os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        self.temperature = temperature

        # Key line: a single attempt per turn; retries are left to the user.
        self.client = client or OpenAI(
            api_key=self.api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )

    def generate_reply(self, messages: Sequence[Dict[str, str]]) -> str:
        payload = validate_messages(messages)

        kwargs: Dict[str, Any] = {"model": self.model_name, "messages": payload}
        if self.temperature is not None:
            kwargs["temperature"] = self.temperature

        try:
            completion = self.client.chat.completions.create(**kwargs)
        except OpenAIError as e:
            raise ChatClientError(f"OpenAI API call failed: {e}") from e

        choices = getattr(completion, "choices", None) or []
        text = choices[0].message.content if choices else None
        if not text or not text.strip():
            raise ChatClientError("OpenAI returned an empty response.")

        return text.strip()
