"""Plain text rendering of threads and messages.

Pure functions of their input: they never call the API.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping

AUTHOR_LABELS = {"user": "You", "bot": "Bot"}


def _timestamp(value: Any) -> str:
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M")
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%Y-%m-%d %H:%M")
        except ValueError:
            return value
    return ""


def render_thread_list(threads: Iterable[Mapping[str, Any]]) -> str:
    rows = [
        f"{t['id']:>6}  {_timestamp(t.get('created_at')):<16}  {t['title']}"
        for t in threads
    ]
    if not rows:
        return "No conversations yet."
    return "\n".join(rows)


def render_message_list(messages: Iterable[Mapping[str, Any]]) -> str:
    blocks = []
    for m in messages:
        author = AUTHOR_LABELS.get(m.get("type", ""), m.get("type", "?"))
        header = f"[{_timestamp(m.get('created_at'))}] {author}:"
        blocks.append(f"{header}\n  " + m["content"].replace("\n", "\n  "))
    if not blocks:
        return "No messages yet."
    return "\n\n".join(blocks)


def render_thread(thread: Mapping[str, Any], messages: Iterable[Mapping[str, Any]]) -> str:
    title = thread["title"]
    return f"{title}\n{'=' * len(title)}\n\n{render_message_list(messages)}"
