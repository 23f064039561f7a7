# Role: Local developer CLI to interact with ChatService without the web UI.
# Uses the same store/provider configuration as the API, so chats started here show up in the UI.

from __future__ import annotations

import time
from typing import Optional

import backend.config
backend.config.load_env()
backend.config.configure_logging()

from backend.api.deps import get_chat_service
from backend.core.chat_service import ChatService
from backend.core.errors import SessionNotFound, StoreError
from backend.llm.base import ChatClientError

HELP = "Commands: /new, /list, /open <id>, /delete [id], /session, /exit"


def _new_session_id() -> str:
    return str(int(time.time() * 1000))


def _print_sessions(service: ChatService) -> None:
    sessions = service.list_sessions()
    if not sessions:
        print("(no saved chats)")
        return
    for s in sessions:
        print(f"  {s.id}  {s.date:%Y-%m-%d}  {s.title}")


def _print_transcript(service: ChatService, session_id: str) -> bool:
    try:
        messages = service.get_messages(session_id)
    except SessionNotFound:
        print(f"No session with id {session_id}")
        return False
    for m in messages:
        who = "You" if m.role == "user" else "Assistant"
        print(f"\n{who}: {m.content}")
    return True


def handle_command(service: ChatService, cmd: str, session_id: str) -> Optional[str]:
    # Returns the (possibly new) active session id, or None to exit.
    name, _, arg = cmd.partition(" ")
    arg = arg.strip()

    if name in {"/exit", "/quit"}:
        return None

    if name == "/new":
        session_id = _new_session_id()
        print(f"New session_id: {session_id}")
    elif name == "/list":
        _print_sessions(service)
    elif name == "/open":
        if not arg:
            print("Usage: /open <id>")
        elif _print_transcript(service, arg):
            session_id = arg
    elif name == "/delete":
        target = arg or session_id
        try:
            service.delete_session(target)
            print(f"Deleted {target}")
        except SessionNotFound:
            print(f"No session with id {target}")
        if target == session_id:
            session_id = _new_session_id()
            print(f"New session_id: {session_id}")
    elif name == "/session":
        print(f"session_id: {session_id}")
    else:
        print(HELP)
    return session_id


def main() -> None:
    # 1) Build ChatService from the environment
    # 2) Maintain a session_id across turns
    # 3) Route user input -> ChatService -> print assistant output
    print("Chat CLI")
    print(HELP)
    print("-" * 50)

    service = get_chat_service()
    session_id = _new_session_id()
    print(f"session_id: {session_id}")

    while True:
        try:
            user_message = input("\nYou: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not user_message:
            continue

        if user_message.lower() in {"exit", "quit"}:
            print("Bye!")
            return

        if user_message.startswith("/"):
            try:
                next_id = handle_command(service, user_message, session_id)
            except StoreError as e:
                print(f"Storage error: {e}")
                continue
            if next_id is None:
                print("Bye!")
                return
            session_id = next_id
            continue

        try:
            result = service.send_message(session_id, user_message)
        except ChatClientError:
            print("\nAssistant request failed; your message was not saved. Try again.")
            continue
        except StoreError as e:
            print(f"\nStorage error: {e}")
            continue
        print(f"\nAssistant: {result.reply}")


if __name__ == "__main__":
    main()
