"""Registration workflow: the single place where event registration rules live.

Every check-then-write sequence here ends in one commit. The event row is
versioned, so appending to (or removing from) its attendee list is a
compare-and-swap: if another request changed the event in the meantime the
flush raises ``StaleDataError`` and the whole operation is re-evaluated
against fresh state. The ``(event_id, user_id)`` unique constraint on
registrations backs up the duplicate check.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from campus_connect.auth.principal import Principal
from campus_connect.models import Event, Registration
from campus_connect.services.error_codes import ErrorCode
from campus_connect.services.events_service import (
    current_registration_count,
    get_event,
    require_principal,
)
from campus_connect.services.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

MAX_VERSION_ATTEMPTS = 3

T = TypeVar("T")


@dataclass(frozen=True)
class RegistrationStatus:
    is_registered: bool
    current_attendees: int | None = None
    max_attendees: int | None = None
    is_full: bool | None = None


def _retry_on_version_conflict(db: Session, event_id: str, action: Callable[[], T]) -> T:
    for attempt in range(1, MAX_VERSION_ATTEMPTS + 1):
        try:
            return action()
        except StaleDataError:
            db.rollback()
            logger.warning("registration_race_retry", event_id=event_id, attempt=attempt)
    raise ConflictError(
        ErrorCode.CONCURRENT_UPDATE, "event was modified concurrently, please retry"
    )


def _is_registered(db: Session, event_id: str, user_id: str) -> bool:
    return (
        db.scalar(
            select(Registration.id)
            .where(Registration.event_id == event_id, Registration.user_id == user_id)
            .limit(1)
        )
        is not None
    )


def is_participant(db: Session, event: Event, user_id: str) -> bool:
    """Creator or registered attendee; gates chat and photo sharing."""
    return event.creator_id == user_id or _is_registered(db, event.id, user_id)


def _missing_answers(event: Event, answers: dict[str, Any]) -> list[str]:
    missing: list[str] = []
    for custom_field in event.custom_fields or []:
        if not custom_field.get("required"):
            continue
        value = answers.get(custom_field.get("id"))
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(custom_field.get("label") or custom_field.get("id"))
    return missing


def _try_register(db: Session, event: Event, registration: Registration) -> None:
    """Insert the registration and append to the attendee list atomically."""
    db.add(registration)
    event.attendees = [*event.attendees, registration.user_id]
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(ErrorCode.ALREADY_REGISTERED, "Already registered") from exc


def register_for_event(
    db: Session,
    principal: Principal | None,
    event_id: str,
    registration_data: dict[str, Any] | None = None,
) -> Registration:
    user = require_principal(principal)
    answers = dict(registration_data or {})

    def attempt() -> Registration:
        event = get_event(db, event_id)

        if _is_registered(db, event.id, user.user_id):
            raise ConflictError(ErrorCode.ALREADY_REGISTERED, "Already registered")

        if event.capacity is not None:
            if current_registration_count(db, event.id) >= event.capacity:
                raise ConflictError(ErrorCode.AT_CAPACITY, "Event is at capacity")

        missing = _missing_answers(event, answers)
        if missing:
            raise ValidationError(
                ErrorCode.MISSING_REGISTRATION_FIELDS,
                f"Missing answers for required fields: {', '.join(missing)}",
            )

        registration = Registration(
            event_id=event.id,
            user_id=user.user_id,
            user_name=user.display_name,
            user_email=user.email,
            registration_data=answers,
        )
        _try_register(db, event, registration)
        return registration

    registration = _retry_on_version_conflict(db, event_id, attempt)
    logger.info(
        "registration_created",
        event_id=event_id,
        registration_id=registration.id,
    )
    return registration


def unregister_from_event(db: Session, principal: Principal | None, event_id: str) -> None:
    user = require_principal(principal)

    def attempt() -> int:
        event = get_event(db, event_id)
        registrations = db.scalars(
            select(Registration).where(
                Registration.event_id == event.id,
                Registration.user_id == user.user_id,
            )
        ).all()
        if not registrations:
            raise NotFoundError(ErrorCode.NOT_REGISTERED, "Not registered for this event")

        for registration in registrations:
            db.delete(registration)
        event.attendees = [a for a in event.attendees if a != user.user_id]
        db.commit()
        return len(registrations)

    removed = _retry_on_version_conflict(db, event_id, attempt)
    logger.info("registration_removed", event_id=event_id, removed=removed)


def get_registration_status(
    db: Session, principal: Principal | None, event_id: str
) -> RegistrationStatus:
    """Registration state of the caller.

    A missing event is not an error: the caller is simply not registered.
    """
    user = require_principal(principal)
    is_registered = _is_registered(db, event_id, user.user_id)

    event = db.get(Event, event_id)
    if event is None:
        return RegistrationStatus(is_registered=is_registered)

    current = current_registration_count(db, event.id)
    return RegistrationStatus(
        is_registered=is_registered,
        current_attendees=current,
        max_attendees=event.capacity,
        is_full=event.capacity is not None and current >= event.capacity,
    )


def get_attendees(db: Session, principal: Principal | None, event_id: str) -> list[Registration]:
    user = require_principal(principal)
    event = get_event(db, event_id)
    if event.creator_id != user.user_id:
        raise PermissionDeniedError(message="only the event creator can list attendees")

    return list(
        db.scalars(
            select(Registration)
            .where(Registration.event_id == event.id)
            .order_by(Registration.registered_at.asc())
        ).all()
    )
