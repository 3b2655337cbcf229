from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from chatapi.api import deps
from chatapi.core.errors import internal_errors
from chatapi.schemas.base import ErrorResponse
from chatapi.schemas.message import MessageCreate, MessageRead
from chatapi.schemas.thread import (
    ThreadCreate,
    ThreadCreated,
    ThreadDeleted,
    ThreadRead,
    ThreadUpdate,
)
from chatapi.services.message import create_message, list_messages
from chatapi.services.thread import (
    create_thread,
    delete_thread,
    get_thread_or_404,
    list_threads,
    rename_thread,
)

router = APIRouter(
    prefix="/threads",
    tags=["threads"],
    responses={
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@router.get("", response_model=list[ThreadRead], summary="List threads",
            description="Threads of the caller, newest first.")
async def list_threads_route(
    auth: deps.AuthContext = Depends(deps.require_auth),
    session: AsyncSession = Depends(deps.get_db),
):
    with internal_errors("Failed to fetch threads from database"):
        return await list_threads(session, user_id=auth.subject)


@router.get("/{thread_id}", response_model=ThreadRead, summary="Get a thread",
            responses={404: {"model": ErrorResponse}})
async def get_thread_route(
    thread_id: int,
    auth: deps.AuthContext = Depends(deps.require_auth),
    session: AsyncSession = Depends(deps.get_db),
):
    with internal_errors("Failed to fetch thread from database"):
        return await get_thread_or_404(session, thread_id, user_id=auth.subject)


@router.get("/{thread_id}/messages", response_model=list[MessageRead],
            summary="List messages in a thread",
            description="Oldest first. An empty thread yields an empty list, not a 404.")
async def list_messages_route(
    thread_id: int,
    auth: deps.AuthContext = Depends(deps.require_auth),
    session: AsyncSession = Depends(deps.get_db),
):
    with internal_errors("Failed to fetch messages from database"):
        return await list_messages(session, thread_id, user_id=auth.subject)


@router.post("/{thread_id}/messages", response_model=MessageRead,
             status_code=status.HTTP_201_CREATED, summary="Add a message to a thread",
             responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}})
async def create_message_route(
    thread_id: int,
    payload: MessageCreate,
    auth: deps.AuthContext = Depends(deps.require_auth),
    session: AsyncSession = Depends(deps.get_db),
):
    with internal_errors("Failed to create message"):
        msg = await create_message(
            session,
            thread_id,
            type=payload.type,
            content=payload.content,
            user_id=auth.subject,
        )
        await session.commit()
        return msg


@router.post("", response_model=ThreadCreated, status_code=status.HTTP_201_CREATED,
             summary="Create a thread with its first message",
             responses={400: {"model": ErrorResponse}})
async def create_thread_route(
    payload: ThreadCreate,
    auth: deps.AuthContext = Depends(deps.require_auth),
    session: AsyncSession = Depends(deps.get_db),
):
    with internal_errors("Failed to create thread"):
        # both inserts share one transaction; nothing is kept unless both land
        thread, message = await create_thread(
            session, title=payload.title, content=payload.content, user_id=auth.subject
        )
        await session.commit()
        return ThreadCreated(
            thread=ThreadRead.model_validate(thread),
            message=MessageRead.model_validate(message),
        )


@router.patch("/{thread_id}", response_model=ThreadRead, summary="Rename a thread",
              responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}})
async def update_thread_route(
    thread_id: int,
    payload: ThreadUpdate,
    auth: deps.AuthContext = Depends(deps.require_auth),
    session: AsyncSession = Depends(deps.get_db),
):
    with internal_errors("Failed to update thread"):
        thread = await rename_thread(session, thread_id, title=payload.title, user_id=auth.subject)
        await session.commit()
        return thread


@router.delete("/{thread_id}", response_model=ThreadDeleted, summary="Delete a thread",
               description="Deletes the thread and, by cascade, all of its messages.",
               responses={404: {"model": ErrorResponse}})
async def delete_thread_route(
    thread_id: int,
    auth: deps.AuthContext = Depends(deps.require_auth),
    session: AsyncSession = Depends(deps.get_db),
):
    with internal_errors("Failed to delete thread"):
        deleted_id = await delete_thread(session, thread_id, user_id=auth.subject)
        await session.commit()
        return ThreadDeleted(deleted_id=deleted_id)
