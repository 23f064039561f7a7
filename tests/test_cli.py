from cli import handle_command


def test_list_and_open(service, capsys):
    service.send_message("111", "hello cli")

    assert handle_command(service, "/list", "999") == "999"
    assert "hello cli" in capsys.readouterr().out

    assert handle_command(service, "/open 111", "999") == "111"
    out = capsys.readouterr().out
    assert "You: hello cli" in out
    assert "Assistant: Hello from the assistant" in out


def test_open_unknown_keeps_current_session(service, capsys):
    assert handle_command(service, "/open nope", "999") == "999"
    assert "No session" in capsys.readouterr().out


def test_delete_active_session_starts_a_new_one(service, store):
    service.send_message("111", "bye")
    next_id = handle_command(service, "/delete", "111")
    assert next_id != "111"
    assert store.get("111") is None


def test_exit():
    assert handle_command(None, "/exit", "1") is None
