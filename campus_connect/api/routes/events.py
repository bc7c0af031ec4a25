from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campus_connect.api.routes.schemas import EventCreate, EventOut, EventUpdate
from campus_connect.auth.deps import CurrentPrincipal, OptionalPrincipal
from campus_connect.auth.principal import Principal
from campus_connect.core.config import settings
from campus_connect.db import get_db
from campus_connect.models import Event
from campus_connect.services import events_service
from campus_connect.storage import StorageAdapter, get_storage

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/events", tags=["events"])

DBSession = Annotated[Session, Depends(get_db)]
Storage = Annotated[StorageAdapter, Depends(get_storage)]


def to_event_out(event: Event, viewer: Principal | None) -> EventOut:
    out = EventOut.model_validate(event)
    # access codes are for the creator's eyes only
    if viewer is None or viewer.user_id != event.creator_id:
        out = out.model_copy(update={"access_code": None})
    return out


@router.get("", response_model=list[EventOut])
def list_events(db: DBSession, principal: OptionalPrincipal):
    try:
        events = events_service.list_events(db)
    except SQLAlchemyError:
        if not settings.tolerate_list_failures:
            raise
        logger.warning("event_list_failed", exc_info=True)
        return []
    return [to_event_out(e, principal) for e in events]


@router.post("", response_model=EventOut, status_code=201)
def create_event(principal: CurrentPrincipal, payload: EventCreate, db: DBSession):
    event = events_service.create_event(db, principal, payload)
    return to_event_out(event, principal)


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: str, db: DBSession, principal: OptionalPrincipal):
    return to_event_out(events_service.get_event(db, event_id), principal)


@router.put("/{event_id}", response_model=EventOut)
def update_event(
    event_id: str,
    principal: CurrentPrincipal,
    payload: EventUpdate,
    db: DBSession,
):
    event = events_service.update_event(db, principal, event_id, payload)
    return to_event_out(event, principal)


@router.delete("/{event_id}", status_code=204)
def delete_event(event_id: str, principal: CurrentPrincipal, db: DBSession, storage: Storage):
    events_service.delete_event(db, principal, event_id, storage=storage)
    return Response(status_code=204)
