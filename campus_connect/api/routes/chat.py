from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from campus_connect.api.routes.schemas import ChatMessageCreate, ChatMessageOut, ChatStatusOut
from campus_connect.auth.deps import CurrentPrincipal
from campus_connect.db import get_db
from campus_connect.services import chat_service

router = APIRouter(prefix="/events", tags=["chat"])

DBSession = Annotated[Session, Depends(get_db)]


@router.get("/{event_id}/chat", response_model=list[ChatMessageOut])
def list_messages(
    event_id: str,
    principal: CurrentPrincipal,
    db: DBSession,
    since: datetime | None = None,
):
    """Poll for messages; pass the last seen timestamp as ``since``."""
    return chat_service.list_messages(db, principal, event_id, since=since)


@router.post("/{event_id}/chat", response_model=ChatMessageOut, status_code=201)
def send_message(
    event_id: str,
    principal: CurrentPrincipal,
    payload: ChatMessageCreate,
    db: DBSession,
):
    return chat_service.send_message(db, principal, event_id, payload.message)


@router.get("/{event_id}/chat/status", response_model=ChatStatusOut)
def chat_status(event_id: str, db: DBSession):
    return chat_service.chat_status(db, event_id)
