from typing import Annotated

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from campus_connect.api.routes.schemas import (
    RegistrationCreate,
    RegistrationOut,
    RegistrationStatusOut,
)
from campus_connect.auth.deps import CurrentPrincipal
from campus_connect.db import get_db
from campus_connect.services import registration_service

router = APIRouter(prefix="/events", tags=["registrations"])

DBSession = Annotated[Session, Depends(get_db)]


@router.post("/{event_id}/register", response_model=RegistrationOut, status_code=201)
def register(
    event_id: str,
    principal: CurrentPrincipal,
    db: DBSession,
    payload: RegistrationCreate | None = None,
):
    answers = payload.registration_data if payload else {}
    return registration_service.register_for_event(db, principal, event_id, answers)


@router.delete("/{event_id}/register", status_code=204)
def unregister(event_id: str, principal: CurrentPrincipal, db: DBSession):
    registration_service.unregister_from_event(db, principal, event_id)
    return Response(status_code=204)


@router.get(
    "/{event_id}/registration",
    response_model=RegistrationStatusOut,
    response_model_exclude_unset=True,
)
def registration_status(event_id: str, principal: CurrentPrincipal, db: DBSession):
    status = registration_service.get_registration_status(db, principal, event_id)
    if status.current_attendees is None:
        # unknown event: only the caller's own state is reported
        return RegistrationStatusOut(is_registered=status.is_registered)
    return RegistrationStatusOut.model_validate(status)


@router.get("/{event_id}/attendees", response_model=list[RegistrationOut])
def attendees(event_id: str, principal: CurrentPrincipal, db: DBSession):
    return registration_service.get_attendees(db, principal, event_id)
