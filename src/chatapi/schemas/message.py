from pydantic import BaseModel
from chatapi.models.message import MessageType
from .base import ORMBase, UtcDatetime


class MessageCreate(BaseModel):
    # plain str: an unknown type is a 400 with its own message, not a schema error
    type: str | None = None
    content: str | None = None


class MessageRead(ORMBase):
    id: int
    thread_id: int
    type: MessageType
    content: str
    created_at: UtcDatetime
