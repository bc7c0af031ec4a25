from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from campus_connect.api.routes.events import to_event_out
from campus_connect.api.routes.schemas import (
    EventOut,
    PrincipalOut,
    RegistrationOut,
    UserCreate,
    UserOut,
    UserUpdate,
)
from campus_connect.auth.deps import CurrentPrincipal, OptionalPrincipal
from campus_connect.db import get_db
from campus_connect.services import events_service, users_service

router = APIRouter(tags=["users"])

DBSession = Annotated[Session, Depends(get_db)]


@router.get("/getUser", response_model=PrincipalOut)
def get_principal(principal: CurrentPrincipal):
    return principal.to_dict()


@router.get("/users/me", response_model=PrincipalOut)
def me(principal: CurrentPrincipal):
    return principal.to_dict()


@router.post("/users", response_model=UserOut, status_code=201)
def create_user(principal: CurrentPrincipal, payload: UserCreate, db: DBSession):
    return users_service.create_user(db, principal, payload)


@router.get("/users/email/{email}", response_model=UserOut)
def get_user_by_email(email: str, principal: CurrentPrincipal, db: DBSession):
    return users_service.get_user_by_email(db, email)


@router.get("/users/{user_id}", response_model=UserOut)
def get_user(user_id: str, principal: CurrentPrincipal, db: DBSession):
    return users_service.get_user(db, user_id)


@router.put("/users/{user_id}", response_model=UserOut)
def update_user(user_id: str, principal: CurrentPrincipal, payload: UserUpdate, db: DBSession):
    return users_service.update_user(db, principal, user_id, payload)


@router.get("/users/{user_id}/events", response_model=list[EventOut])
def user_events(user_id: str, db: DBSession, principal: OptionalPrincipal):
    return [to_event_out(e, principal) for e in events_service.list_events_by_creator(db, user_id)]


@router.get("/users/{user_id}/registrations", response_model=list[RegistrationOut])
def user_registrations(user_id: str, principal: CurrentPrincipal, db: DBSession):
    return users_service.list_user_registrations(db, principal, user_id)
