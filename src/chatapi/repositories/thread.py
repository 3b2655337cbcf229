"""Repository helpers for the Thread model.

Every lookup takes the owner subject; a thread belonging to someone else is
indistinguishable from a missing one at this layer.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from chatapi.models.thread import Thread
from chatapi.models.message import Message

__all__ = [
    "get_by_id",
    "list_for_user",
    "create",
    "update_title",
    "delete_by_id",
]


async def get_by_id(session: AsyncSession, thread_id: int, *, user_id: str) -> Optional[Thread]:
    """Return a Thread by id or None if it does not exist for this owner."""
    res = await session.execute(
        select(Thread).where(Thread.id == thread_id, Thread.user_id == user_id)
    )
    return res.scalar_one_or_none()


async def list_for_user(session: AsyncSession, *, user_id: str) -> list[Thread]:
    """Return the owner's threads, newest first."""
    stmt = (
        select(Thread)
        .where(Thread.user_id == user_id)
        .order_by(Thread.created_at.desc(), Thread.id.desc())
    )
    res = await session.execute(stmt)
    return list(res.scalars().all())


async def create(session: AsyncSession, *, title: str, user_id: str) -> Thread:
    """Insert a Thread and flush so the generated id is available (not committed)."""
    thread = Thread(title=title, user_id=user_id)
    session.add(thread)
    await session.flush()
    return thread


async def update_title(
    session: AsyncSession, thread_id: int, *, title: str, user_id: str
) -> Optional[Thread]:
    thread = await get_by_id(session, thread_id, user_id=user_id)
    if thread is None:
        return None
    thread.title = title
    await session.flush()
    return thread


async def delete_by_id(session: AsyncSession, thread_id: int, *, user_id: str) -> Optional[int]:
    """Delete a thread and all of its messages; return the deleted id or None.

    Messages are removed explicitly as well as by the FK cascade so the
    behaviour does not depend on the backend enforcing foreign keys.
    """
    thread = await get_by_id(session, thread_id, user_id=user_id)
    if thread is None:
        return None
    deleted_id = thread.id
    await session.execute(delete(Message).where(Message.thread_id == deleted_id))
    await session.execute(delete(Thread).where(Thread.id == deleted_id))
    return deleted_id
