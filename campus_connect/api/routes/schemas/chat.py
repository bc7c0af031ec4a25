from __future__ import annotations

from datetime import datetime

from campus_connect.api.routes.schemas.base import SchemaBase
from campus_connect.models.chat_message import ChatMessageType


class ChatMessageCreate(SchemaBase):
    message: str | None = None


class ChatMessageOut(SchemaBase):
    id: str
    event_id: str
    user_id: str
    user_name: str
    message: str
    type: ChatMessageType
    timestamp: datetime


class ChatStatusOut(SchemaBase):
    event_id: str
    is_active: bool
    event_start_time: datetime
    event_end_time: datetime
    current_time: datetime
