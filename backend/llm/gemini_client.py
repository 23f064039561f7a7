# Role: Minimal wrapper around the Gemini API. Centralizes model name, temperature, and error handling,
# so the rest of the code calls a single method: generate_reply(messages).

import os
from typing import Any, Dict, List, Optional, Sequence

from google import genai

from backend.llm.base import ChatClientError, validate_messages

# Gemini names the assistant side "model".
_ROLE_MAP = {"user": "user", "assistant": "model"}


class GeminiClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: float = 0.7,
        client: Optional[Any] = None,
    ) -> None:
        # Key lines:
        # - Reads secrets from env (no secrets in code).
        # - Model and temperature are configurable for experiments.
        self.api_key = api_key or os.getenv("GEMINI_API_KEY")
        if not self.api_key and client is None:
            raise ChatClientError("Missing GEMINI_API_KEY in environment or .env")

        self.model_name = model or os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
        self.temperature = temperature

        self.client = client or genai.Client(api_key=self.api_key)

    def _to_contents(self, messages: Sequence[Dict[str, str]]) -> tuple:
        system_parts: List[str] = []
        contents: List[Dict[str, Any]] = []
        for m in messages:
            if m["role"] == "system":
                system_parts.append(m["content"])
                continue
            contents.append({"role": _ROLE_MAP[m["role"]], "parts": [{"text": m["content"]}]})
        system_instruction = "\n\n".join(p for p in system_parts if p) or None
        return contents, system_instruction

    def generate_reply(self, messages: Sequence[Dict[str, str]]) -> str:
        # 1) Validate messages
        # 2) Call Gemini with the whole history (system turns become system_instruction)
        # 3) Validate non-empty response
        contents, system_instruction = self._to_contents(validate_messages(messages))

        config: Dict[str, Any] = {"temperature": self.temperature}
        if system_instruction:
            config["system_instruction"] = system_instruction

        try:
            resp = self.client.models.generate_content(
                model=self.model_name,
                contents=contents,
                config=config,
            )
        except Exception as e:
            raise ChatClientError(f"Gemini API call failed: {e}") from e

        text = getattr(resp, "text", None)
        if not text:
            raise ChatClientError("Gemini returned an empty response.")

        return text.strip()
