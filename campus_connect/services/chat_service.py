from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from campus_connect.auth.principal import Principal
from campus_connect.core.config import settings
from campus_connect.models import ChatMessage
from campus_connect.models.chat_message import ChatMessageType
from campus_connect.services.error_codes import ErrorCode
from campus_connect.services.events_service import get_event, require_principal
from campus_connect.services.exceptions import PermissionDeniedError, ValidationError
from campus_connect.services.registration_service import is_participant

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ChatStatus:
    event_id: str
    is_active: bool
    event_start_time: datetime
    event_end_time: datetime
    current_time: datetime


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def list_messages(
    db: Session,
    principal: Principal | None,
    event_id: str,
    since: datetime | None = None,
) -> list[ChatMessage]:
    require_principal(principal)
    event = get_event(db, event_id)

    stmt = select(ChatMessage).where(ChatMessage.event_id == event.id)
    if since is not None:
        stmt = stmt.where(ChatMessage.timestamp > _as_utc(since))
    return list(db.scalars(stmt.order_by(ChatMessage.timestamp.asc())).all())


def send_message(
    db: Session, principal: Principal | None, event_id: str, message: str | None
) -> ChatMessage:
    sender = require_principal(principal)
    event = get_event(db, event_id)

    if not is_participant(db, event, sender.user_id):
        raise PermissionDeniedError(message="register for the event to join its chat")

    text = (message or "").strip()
    if not text:
        raise ValidationError(ErrorCode.MISSING_FIELDS, "Missing required fields: message")
    if len(text) > settings.chat_max_message_length:
        raise ValidationError(
            ErrorCode.INVALID_INPUT,
            f"message exceeds {settings.chat_max_message_length} characters",
        )

    chat_message = ChatMessage(
        event_id=event.id,
        user_id=sender.user_id,
        user_name=sender.display_name,
        message=text,
        type=ChatMessageType.TEXT,
    )
    db.add(chat_message)
    db.commit()
    db.refresh(chat_message)

    logger.info("chat_message_sent", event_id=event.id, message_id=chat_message.id)
    return chat_message


def chat_status(db: Session, event_id: str, now: datetime | None = None) -> ChatStatus:
    """The chat is live from the event's start until the window closes.

    Event date and time are local wall-clock values, so they are compared
    against local naive "now".
    """
    event = get_event(db, event_id)
    current = now or datetime.now()
    start = event.starts_at
    end = start + timedelta(hours=settings.chat_window_hours)
    return ChatStatus(
        event_id=event.id,
        is_active=start <= current <= end,
        event_start_time=start,
        event_end_time=end,
        current_time=current,
    )
