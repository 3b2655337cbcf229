"""Repository helpers for the Message model."""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from chatapi.models.message import Message
from chatapi.models.thread import Thread

__all__ = [
    "list_for_thread",
    "create",
]


async def list_for_thread(session: AsyncSession, thread_id: int, *, user_id: str) -> list[Message]:
    """Return the messages of a thread in chronological order.

    Unknown threads (or threads of another owner) yield an empty list.
    """
    stmt = (
        select(Message)
        .join(Thread, Message.thread_id == Thread.id)
        .where(Message.thread_id == thread_id, Thread.user_id == user_id)
        .order_by(Message.created_at.asc(), Message.id.asc())
    )
    res = await session.execute(stmt)
    return list(res.scalars().all())


async def create(session: AsyncSession, *, thread_id: int, type: str, content: str) -> Message:
    """Create a new Message.

    Parameters:
        session: active AsyncSession.
        thread_id: owning thread id (must exist or hit FK constraint on flush).
        type: ``user`` or ``bot``.
        content: already trimmed text.

    Returns the persisted Message (flushed, not committed).
    """
    message = Message(thread_id=thread_id, type=type, content=content)
    session.add(message)
    await session.flush()
    return message
