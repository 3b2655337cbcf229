"""Message service layer.

Encapsulates higher-level operations on messages beyond raw repository
helpers: input validation and the parent thread check.
"""
from sqlalchemy.ext.asyncio import AsyncSession

from chatapi.core.errors import ValidationError
from chatapi.models.message import Message, MessageType
from chatapi.repositories import message as message_repo
from chatapi.repositories import thread as thread_repo
from chatapi.services.thread import ThreadNotFoundError, require_text

__all__ = [
    "list_messages",
    "create_message",
]

MESSAGE_TYPES = {t.value for t in MessageType}


async def list_messages(session: AsyncSession, thread_id: int, *, user_id: str) -> list[Message]:
    return await message_repo.list_for_thread(session, thread_id, user_id=user_id)


async def create_message(
    session: AsyncSession,
    thread_id: int,
    *,
    type: str | None,
    content: str | None,
    user_id: str,
) -> Message:
    if not type or not content:
        raise ValidationError("Both 'type' and 'content' are required")
    if type not in MESSAGE_TYPES:
        raise ValidationError("Type must be either 'user' or 'bot'")
    clean_content = require_text(content, missing="Content is required", empty="Content cannot be empty")
    # Validate parent thread existence for clearer error semantics than an FK failure
    if not await thread_repo.get_by_id(session, thread_id, user_id=user_id):
        raise ThreadNotFoundError()
    return await message_repo.create(session, thread_id=thread_id, type=type, content=clean_content)
