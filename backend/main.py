# Role: FastAPI app bootstrap. Loads environment config early, configures logging, registers routers and
# error handlers, and exposes health/docs endpoints.

from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

import backend.config
backend.config.load_env()
backend.config.configure_logging()

from backend.api.chat import router as chat_router
from backend.api.deps import get_chat_service
from backend.api.errors import register_error_handlers
from backend.api.sessions import router as sessions_router
from backend.core.chat_service import ChatService


def create_app(service: Optional[ChatService] = None) -> FastAPI:
    settings = backend.config.get_settings()

    app = FastAPI(title="Chat History API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if service is not None:
        # Key line: an injected service replaces the process-wide one (tests, embedding).
        app.dependency_overrides[get_chat_service] = lambda: service

    app.include_router(sessions_router)
    app.include_router(chat_router)
    register_error_handlers(app)

    @app.get("/")
    def root() -> dict:
        # Role: quick discoverability for clients (where are docs/health).
        return {
            "message": "Chat History API is running",
            "docs": "/docs",
            "health": "/health",
        }

    @app.get("/health")
    def health(svc: ChatService = Depends(get_chat_service)) -> dict:
        return {"status": "ok", "store": svc.store.ping()}

    return app


app = create_app()
