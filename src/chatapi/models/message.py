import enum
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, ForeignKey, Text, DateTime, CheckConstraint, func
from chatapi.db.session import Base
from chatapi.models.thread import Thread, _utcnow


class MessageType(str, enum.Enum):
    """Author of a message."""
    user = "user"
    bot = "bot"


class Message(Base):
    """chat message"""
    __tablename__ = "messages"
    __table_args__ = (
        CheckConstraint("type IN ('user', 'bot')", name="type"),
    )
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    thread_id: Mapped[int] = mapped_column(
        ForeignKey("threads.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(String(8), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False
    )

    thread: Mapped[Thread] = relationship(back_populates="messages", lazy="raise")
