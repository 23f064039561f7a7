# Role: Central configuration module. Loads .env into environment variables, computes runtime flags (DEBUG)
# and exposes a cached Settings snapshot that the API, CLI and UI read instead of calling os.getenv directly.

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv

DEBUG: bool = False

_TRUTHY = {"1", "true", "yes", "on"}


def load_env() -> None:
    """
    Load .env into os.environ, then recompute DEBUG.
    This makes DEBUG correct even if load_env() is called after import.
    """
    global DEBUG
    load_dotenv()
    # Key line: accept common truthy values.
    DEBUG = os.getenv("DEBUG", "0").lower() in _TRUTHY
    get_settings.cache_clear()


def configure_logging() -> None:
    level = logging.DEBUG if DEBUG else logging.INFO
    logging.basicConfig(level=level, format="[%(asctime)s] %(levelname)s %(name)s - %(message)s")


def _env_int(name: str, default: Optional[int], minimum: int = 1) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    # Key line: counts and lengths below the minimum are treated as unset.
    return value if value >= minimum else default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    # Storage
    session_store: str = "memory"
    mongo_uri: Optional[str] = None
    mongo_db: str = "chat_history"
    mongo_collection: str = "sessions"
    sessions_file: str = "sessions.json"

    # Completion provider
    llm_provider: str = "openai"
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_base_url: Optional[str] = None
    openai_timeout: float = 60.0
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"
    temperature: float = 0.7
    system_prompt: Optional[str] = None
    max_context_messages: Optional[int] = None

    # API
    title_max_length: int = 30
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "Settings":
        mongo_uri = os.getenv("MONGO_URI") or None
        # Key line: an explicit SESSION_STORE wins; otherwise Mongo whenever a URI is configured.
        store = (os.getenv("SESSION_STORE") or ("mongo" if mongo_uri else "memory")).strip().lower()

        return cls(
            session_store=store,
            mongo_uri=mongo_uri,
            mongo_db=os.getenv("MONGO_DB", "chat_history"),
            mongo_collection=os.getenv("MONGO_COLLECTION", "sessions"),
            sessions_file=os.getenv("SESSIONS_FILE", "sessions.json"),
            llm_provider=os.getenv("LLM_PROVIDER", "openai").strip().lower(),
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
            openai_base_url=os.getenv("OPENAI_BASE_URL") or None,
            openai_timeout=_env_float("OPENAI_TIMEOUT", 60.0),
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-1.5-flash"),
            temperature=_env_float("MODEL_TEMPERATURE", 0.7),
            system_prompt=(os.getenv("SYSTEM_PROMPT") or "").strip() or None,
            max_context_messages=_env_int("MAX_CONTEXT_MESSAGES", None),
            title_max_length=_env_int("TITLE_MAX_LENGTH", 30) or 30,
            cors_origins=_env_list("CORS_ORIGINS", "*"),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
