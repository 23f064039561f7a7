# Role: Maps domain exceptions to the JSON error bodies the UI understands ({"error": "..."}).
# The message depends on which route failed, mirroring what the UI shows per action.

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend.core.errors import SessionNotFound, StoreError
from backend.llm.base import ChatClientError

logger = logging.getLogger(__name__)

SEND_FAILED = "AI request failed or internal server error"

_STORE_FAILURES = {
    "list_sessions": "Failed to fetch sessions",
    "get_session_messages": "Failed to fetch messages",
    "delete_session": "Failed to delete session",
    "send": SEND_FAILED,
}


def _route_name(request: Request) -> str:
    route = request.scope.get("route")
    if route is not None:
        return getattr(route, "name", "") or ""
    endpoint = request.scope.get("endpoint")
    return getattr(endpoint, "__name__", "") or ""


async def session_not_found_handler(request: Request, exc: SessionNotFound) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "Session not found"})


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    name = _route_name(request)
    logger.error("Store failure in %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": _STORE_FAILURES.get(name, "Internal server error")})


async def chat_client_error_handler(request: Request, exc: ChatClientError) -> JSONResponse:
    # Details already logged by ChatService; clients get the generic message only.
    return JSONResponse(status_code=500, content={"error": SEND_FAILED})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Last resort: anything the domain handlers did not claim still answers with the JSON error shape.
    logger.exception("Unhandled error in %s %s", request.method, request.url.path, exc_info=exc)
    name = _route_name(request)
    return JSONResponse(status_code=500, content={"error": _STORE_FAILURES.get(name, "Internal server error")})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SessionNotFound, session_not_found_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(ChatClientError, chat_client_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
