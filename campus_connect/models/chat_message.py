from __future__ import annotations

from datetime import datetime
from enum import Enum

import sqlalchemy as sa
from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from campus_connect.models.base import Base, UUIDPrimaryKeyMixin, utcnow


class ChatMessageType(str, Enum):
    TEXT = "text"
    SYSTEM = "system"


class ChatMessage(Base, UUIDPrimaryKeyMixin):
    __tablename__ = "chat_messages"
    __table_args__ = (sa.Index("ix_chat_messages_event_timestamp", "event_id", "timestamp"),)

    event_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    user_name: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[ChatMessageType] = mapped_column(
        sa.Enum(
            ChatMessageType,
            name="chat_message_type",
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
        default=ChatMessageType.TEXT,
    )
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
