# Role: HTTP client for the chat backend, used by the Streamlit UI.
# Backend is authoritative; this module only shapes requests and turns failures into ApiError.

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import requests

DEFAULT_BACKEND_URL = "http://127.0.0.1:5000"


class ApiError(RuntimeError):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return f"HTTP {resp.status_code}"
    if isinstance(body, dict):
        return str(body.get("error") or body.get("detail") or f"HTTP {resp.status_code}")
    return f"HTTP {resp.status_code}"


class ChatApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = (base_url or os.getenv("BACKEND_URL") or DEFAULT_BACKEND_URL).rstrip("/")
        self.http = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        try:
            resp = self.http.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ApiError(f"Could not reach the backend at {self.base_url}: {e}") from e

        if resp.status_code >= 400:
            raise ApiError(_error_message(resp), status_code=resp.status_code)
        return resp

    def list_sessions(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/sessions").json()

    def get_messages(self, session_id: str) -> List[Dict[str, Any]]:
        try:
            return self._request("GET", f"/sessions/{session_id}").json()
        except ApiError as e:
            # Key line: an unknown id is simply an empty conversation (e.g. a chat that was never answered).
            if e.status_code == 404:
                return []
            raise

    def send_message(self, session_id: str, message: str) -> str:
        resp = self._request("POST", f"/send/{session_id}", json={"message": message})
        return resp.json()["reply"]

    def delete_session(self, session_id: str) -> bool:
        try:
            self._request("DELETE", f"/sessions/{session_id}")
        except ApiError as e:
            if e.status_code == 404:
                return False
            raise
        return True
