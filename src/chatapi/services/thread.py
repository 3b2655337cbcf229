"""Service helpers for thread domain logic.

Adds input validation and not-found error mapping on top of the repository
helpers. Nothing here commits: routers own the transaction so a compound
operation either lands completely or not at all.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from chatapi.core.errors import NotFoundError, ValidationError
from chatapi.models.message import Message, MessageType
from chatapi.models.thread import Thread
from chatapi.repositories import message as message_repo
from chatapi.repositories import thread as thread_repo

__all__ = [
    "ThreadNotFoundError",
    "require_text",
    "list_threads",
    "get_thread_or_404",
    "create_thread",
    "rename_thread",
    "delete_thread",
]


class ThreadNotFoundError(NotFoundError):
    default_message = "Thread not found"


def require_text(value: str | None, *, missing: str, empty: str) -> str:
    """Return ``value`` trimmed, or raise ``ValidationError``.

    ``missing`` is used for an absent or zero-length value, ``empty`` for one
    that only contains whitespace.
    """
    if not value:
        raise ValidationError(missing)
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(empty)
    return trimmed


async def list_threads(session: AsyncSession, *, user_id: str) -> list[Thread]:
    return await thread_repo.list_for_user(session, user_id=user_id)


async def get_thread_or_404(session: AsyncSession, thread_id: int, *, user_id: str) -> Thread:
    thread = await thread_repo.get_by_id(session, thread_id, user_id=user_id)
    if not thread:
        raise ThreadNotFoundError()
    return thread


async def create_thread(
    session: AsyncSession, *, title: str | None, content: str | None, user_id: str
) -> tuple[Thread, Message]:
    """Create a thread and its first (user) message in the current transaction."""
    if not title or not content:
        raise ValidationError("Both 'title' and 'content' are required")
    clean_title = require_text(title, missing="Title is required", empty="Title cannot be empty")
    clean_content = require_text(content, missing="Content is required", empty="Content cannot be empty")

    thread = await thread_repo.create(session, title=clean_title, user_id=user_id)
    message = await message_repo.create(
        session, thread_id=thread.id, type=MessageType.user.value, content=clean_content
    )
    return thread, message


async def rename_thread(
    session: AsyncSession, thread_id: int, *, title: str | None, user_id: str
) -> Thread:
    clean_title = require_text(title, missing="Title is required", empty="Title cannot be empty")
    thread = await thread_repo.update_title(session, thread_id, title=clean_title, user_id=user_id)
    if not thread:
        raise ThreadNotFoundError()
    return thread


async def delete_thread(session: AsyncSession, thread_id: int, *, user_id: str) -> int:
    deleted_id = await thread_repo.delete_by_id(session, thread_id, user_id=user_id)
    if deleted_id is None:
        raise ThreadNotFoundError()
    return deleted_id
