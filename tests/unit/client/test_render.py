import pytest

from chatapi.client.render import render_message_list, render_thread, render_thread_list


@pytest.mark.unit
def test_render_thread_list():
    out = render_thread_list([
        {"id": 2, "title": "Newer", "created_at": "2026-10-01T12:30:00+00:00"},
        {"id": 1, "title": "Older", "created_at": "2026-09-30T08:00:00Z"},
    ])
    lines = out.splitlines()
    assert len(lines) == 2
    assert lines[0].split() == ["2", "2026-10-01", "12:30", "Newer"]
    assert lines[1].endswith("Older")
    assert render_thread_list([]) == "No conversations yet."


@pytest.mark.unit
def test_render_message_list():
    out = render_message_list([
        {"type": "user", "content": "Hello", "created_at": "2026-10-01T12:30:00+00:00"},
        {"type": "bot", "content": "Hi\nthere", "created_at": "2026-10-01T12:31:00+00:00"},
    ])
    assert out == (
        "[2026-10-01 12:30] You:\n  Hello\n\n"
        "[2026-10-01 12:31] Bot:\n  Hi\n  there"
    )
    assert render_message_list([]) == "No messages yet."


@pytest.mark.unit
def test_render_thread_header():
    out = render_thread({"title": "Chat"}, [])
    assert out == "Chat\n====\n\nNo messages yet."
