from datetime import datetime, timezone
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Text, DateTime, func
from chatapi.db.session import Base
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from chatapi.models.message import Message


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Thread(Base):
    """chat thread"""
    __tablename__ = "threads"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    # subject identifier issued by the credential store
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False
    )

    messages: Mapped[list["Message"]] = relationship(
        back_populates="thread",
        passive_deletes=True,
        lazy="raise",
    )
