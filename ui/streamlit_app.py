# Role: Streamlit chat UI.
# - Backend is authoritative (sessions + transcripts live in the API's store).
# - Sidebar lists previous chats (newest first) with delete buttons.
# - A failed send keeps the user's text so it can be retried.

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

import streamlit as st

from ui.api_client import ApiError, ChatApiClient

NEW_SESSION_ID = "new"
GENERIC_ERROR = "The assistant couldn't reply just now. Your message was kept, so you can retry."


# ----------------------------
# Session helpers
# ----------------------------
def get_client() -> ChatApiClient:
    if "api_client" not in st.session_state:
        st.session_state["api_client"] = ChatApiClient()
    return st.session_state["api_client"]


def new_session_id() -> str:
    # Key line: millisecond timestamps double as creation dates for legacy records.
    return str(int(time.time() * 1000))


def ensure_session() -> None:
    if "active_session_id" not in st.session_state:
        # Restore the active chat from the URL on reload.
        restored = st.query_params.get("session")
        st.session_state["active_session_id"] = restored or NEW_SESSION_ID
        st.session_state["messages"] = None
    st.session_state.setdefault("messages", None)
    st.session_state.setdefault("sessions", None)
    st.session_state.setdefault("busy", False)
    st.session_state.setdefault("failed_message", None)
    st.session_state.setdefault("error", None)


def set_active_session(session_id: str) -> None:
    st.session_state["active_session_id"] = session_id
    st.session_state["messages"] = None
    st.session_state["failed_message"] = None
    st.session_state["error"] = None
    if session_id == NEW_SESSION_ID:
        st.query_params.clear()
    else:
        st.query_params["session"] = session_id


# ----------------------------
# Backend calls
# ----------------------------
def load_sessions(force: bool = False) -> List[Dict[str, Any]]:
    if st.session_state["sessions"] is None or force:
        try:
            st.session_state["sessions"] = get_client().list_sessions()
        except ApiError as e:
            st.session_state["sessions"] = []
            st.sidebar.warning(f"Could not load chats: {e}")
    return st.session_state["sessions"]


def load_messages() -> List[Dict[str, Any]]:
    session_id = st.session_state["active_session_id"]
    if session_id == NEW_SESSION_ID:
        st.session_state["messages"] = []
    elif st.session_state["messages"] is None:
        try:
            st.session_state["messages"] = get_client().get_messages(session_id)
        except ApiError as e:
            st.session_state["messages"] = []
            st.session_state["error"] = f"Could not load this chat: {e}"
    return st.session_state["messages"]


def current_title(sessions: List[Dict[str, Any]]) -> str:
    session_id = st.session_state["active_session_id"]
    if session_id == NEW_SESSION_ID:
        return "New Conversation"
    match: Optional[Dict[str, Any]] = next((s for s in sessions if s.get("id") == session_id), None)
    return match["title"] if match else "New Conversation"


# ----------------------------
# Sidebar
# ----------------------------
def render_sidebar(sessions: List[Dict[str, Any]]) -> None:
    active = st.session_state["active_session_id"]
    busy = st.session_state["busy"]

    if st.sidebar.button(
        "✨ New Conversation",
        use_container_width=True,
        type="primary" if active == NEW_SESSION_ID else "secondary",
        disabled=busy,
    ):
        set_active_session(NEW_SESSION_ID)
        st.rerun()

    st.sidebar.caption("Previous Chats")
    if not sessions:
        st.sidebar.info("No saved chats yet.")
        return

    for s in sessions:
        col_title, col_delete = st.sidebar.columns([5, 1])
        with col_title:
            if st.button(
                s["title"],
                key=f"open-{s['id']}",
                use_container_width=True,
                type="primary" if s["id"] == active else "secondary",
                disabled=busy,
            ):
                if s["id"] != active:
                    set_active_session(s["id"])
                    st.rerun()
        with col_delete:
            if st.button("🗑", key=f"delete-{s['id']}", disabled=busy):
                try:
                    get_client().delete_session(s["id"])
                except ApiError as e:
                    st.sidebar.error(f"Delete failed: {e}")
                else:
                    st.session_state["sessions"] = [x for x in sessions if x["id"] != s["id"]]
                    if s["id"] == active:
                        set_active_session(NEW_SESSION_ID)
                    st.rerun()


# ----------------------------
# Chat
# ----------------------------
def render_chat(messages: List[Dict[str, Any]]) -> None:
    if not messages and st.session_state["active_session_id"] == NEW_SESSION_ID:
        st.markdown(
            "<div style='text-align:center; margin-top:100px; color:#aaa'>Start a new conversation to begin.</div>",
            unsafe_allow_html=True,
        )
        return

    for msg in messages:
        role = "assistant" if msg.get("sender") == "ai" or msg.get("role") == "assistant" else "user"
        with st.chat_message(role):
            st.write(msg.get("content", ""))


def send(user_input: str) -> None:
    # 1) Assign a real id the first time a new conversation is used
    # 2) Echo the user turn, call the backend, echo the reply
    # 3) On failure keep the text for a retry and show a generic error
    session_id = st.session_state["active_session_id"]
    if session_id == NEW_SESSION_ID:
        session_id = new_session_id()
        st.session_state["active_session_id"] = session_id
        st.query_params["session"] = session_id

    messages = st.session_state["messages"] or []
    messages.append({"role": "user", "sender": "user", "content": user_input})
    st.session_state["messages"] = messages
    with st.chat_message("user"):
        st.write(user_input)

    st.session_state["busy"] = True
    try:
        with st.spinner("Thinking..."):
            reply = get_client().send_message(session_id, user_input)
    except ApiError:
        # Backend rolled the turn back; mirror that locally and keep the draft.
        messages.pop()
        st.session_state["failed_message"] = user_input
        st.session_state["error"] = GENERIC_ERROR
    else:
        messages.append({"role": "assistant", "sender": "ai", "content": reply})
        st.session_state["failed_message"] = None
        st.session_state["error"] = None
        load_sessions(force=True)
    finally:
        st.session_state["busy"] = False
    st.rerun()


def render_error() -> None:
    error = st.session_state.get("error")
    if not error:
        return
    st.error(error)
    failed = st.session_state.get("failed_message")
    if failed:
        st.caption(f"Unsent: {failed}")
        if st.button("↻ Retry", disabled=st.session_state["busy"]):
            st.session_state["error"] = None
            send(failed)


# ----------------------------
# Main
# ----------------------------
def main() -> None:
    st.set_page_config(page_title="Chat", page_icon="💬", layout="wide")

    ensure_session()
    sessions = load_sessions()
    render_sidebar(sessions)

    st.title(current_title(sessions))
    messages = load_messages()
    render_chat(messages)
    render_error()

    user_input = st.chat_input("Type your message...", disabled=st.session_state["busy"])
    st.caption("AI can make mistakes. Consider checking important information.")
    if user_input and user_input.strip():
        send(user_input)


if __name__ == "__main__":
    main()
