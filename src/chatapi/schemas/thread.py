from pydantic import BaseModel, ConfigDict, Field
from .base import ORMBase, UtcDatetime
from .message import MessageRead


# Request bodies keep every field optional so that "missing" and "empty" are
# reported by the service layer with field specific messages.
class ThreadCreate(BaseModel):
    title: str | None = None
    content: str | None = None


class ThreadUpdate(BaseModel):
    title: str | None = None


class ThreadRead(ORMBase):
    id: int
    title: str
    created_at: UtcDatetime


class ThreadCreated(BaseModel):
    """A new thread together with its first message."""
    thread: ThreadRead
    message: MessageRead


class ThreadDeleted(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = "Thread deleted successfully"
    deleted_id: int = Field(alias="deletedId")
