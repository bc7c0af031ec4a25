from __future__ import annotations

import secrets
import string
from typing import Any

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from campus_connect.api.routes.schemas.events import EventCreate, EventUpdate
from campus_connect.auth.principal import Principal
from campus_connect.core.config import settings
from campus_connect.models import ChatMessage, Event, Photo, Registration
from campus_connect.models.event import EventCategory
from campus_connect.services.error_codes import ErrorCode
from campus_connect.services.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    UnauthorizedError,
    ValidationError,
)
from campus_connect.storage.base import StorageAdapter

logger = structlog.get_logger(__name__)

REQUIRED_FIELDS = ("title", "description", "date", "time", "location")
ACCESS_CODE_ALPHABET = string.ascii_uppercase + string.digits
ACCESS_CODE_LENGTH = 6


def require_principal(principal: Principal | None) -> Principal:
    if principal is None:
        raise UnauthorizedError()
    return principal


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _generate_access_code() -> str:
    return "".join(secrets.choice(ACCESS_CODE_ALPHABET) for _ in range(ACCESS_CODE_LENGTH))


def _require_manage_permission(principal: Principal, event: Event) -> None:
    if principal.is_admin:
        return
    if event.creator_id != principal.user_id:
        raise PermissionDeniedError(message="only the event creator can modify this event")


def get_event(db: Session, event_id: str) -> Event:
    event = db.get(Event, event_id, populate_existing=True)
    if not event:
        raise NotFoundError(ErrorCode.EVENT_NOT_FOUND, "Event not found")
    return event


def list_events(db: Session) -> list[Event]:
    return list(db.scalars(select(Event).order_by(Event.created_at.desc())).all())


def list_events_by_creator(db: Session, creator_id: str) -> list[Event]:
    return list(
        db.scalars(
            select(Event)
            .where(Event.creator_id == creator_id)
            .order_by(Event.date.desc(), Event.time.desc())
        ).all()
    )


def current_registration_count(db: Session, event_id: str) -> int:
    return int(
        db.scalar(
            select(func.count())
            .select_from(Registration)
            .where(Registration.event_id == event_id)
        )
        or 0
    )


def create_event(db: Session, principal: Principal | None, payload: EventCreate) -> Event:
    creator = require_principal(principal)

    missing = [
        name for name in REQUIRED_FIELDS if _is_blank(getattr(payload, name))
    ]
    if missing:
        raise ValidationError(
            ErrorCode.MISSING_FIELDS,
            f"Missing required fields: {', '.join(missing)}",
        )

    is_private = bool(payload.is_private)
    capacity = payload.capacity if payload.capacity is not None else settings.default_event_capacity

    event = Event(
        title=payload.title.strip(),
        description=payload.description.strip(),
        date=payload.date,
        time=payload.time,
        location=payload.location.strip(),
        latitude=payload.coordinates.latitude if payload.coordinates else None,
        longitude=payload.coordinates.longitude if payload.coordinates else None,
        category=payload.category or EventCategory.OTHER,
        is_private=is_private,
        access_code=_generate_access_code() if is_private else None,
        capacity=capacity,
        creator_id=creator.user_id,
        creator_name=creator.display_name,
        is_official=bool(payload.is_official) and creator.is_faculty,
        attendees=[],
        custom_fields=[
            f.model_dump(mode="json", exclude_none=True) for f in payload.custom_fields or []
        ],
    )
    db.add(event)
    db.commit()
    db.refresh(event)

    logger.info(
        "event_created",
        event_id=event.id,
        creator_id=event.creator_id,
        capacity=event.capacity,
        is_official=event.is_official,
    )
    return event


def update_event(
    db: Session, principal: Principal | None, event_id: str, patch: EventUpdate
) -> Event:
    editor = require_principal(principal)
    event = get_event(db, event_id)
    _require_manage_permission(editor, event)

    patch_data = patch.model_dump(exclude_unset=True)

    blank = [
        name
        for name in REQUIRED_FIELDS
        if name in patch_data and _is_blank(patch_data[name])
    ]
    if blank:
        raise ValidationError(
            ErrorCode.MISSING_FIELDS,
            f"Fields cannot be empty: {', '.join(blank)}",
        )

    if "capacity" in patch_data and patch_data["capacity"] is not None:
        if patch_data["capacity"] < len(event.attendees):
            raise ConflictError(
                ErrorCode.CAPACITY_BELOW_ATTENDEES,
                "capacity cannot be below current attendee count",
            )

    if patch_data.get("is_official") and not editor.is_faculty:
        raise PermissionDeniedError(message="only faculty can mark events as official")

    for key in ("title", "description", "location"):
        if key in patch_data:
            setattr(event, key, patch_data[key].strip())
    for key in ("date", "time", "capacity"):
        if key in patch_data:
            setattr(event, key, patch_data[key])

    if "category" in patch_data:
        event.category = patch_data["category"] or EventCategory.OTHER

    if "coordinates" in patch_data:
        coords = patch.coordinates
        event.latitude = coords.latitude if coords else None
        event.longitude = coords.longitude if coords else None

    if "is_private" in patch_data and patch_data["is_private"] is not None:
        event.is_private = patch_data["is_private"]
        if event.is_private and not event.access_code:
            event.access_code = _generate_access_code()
        elif not event.is_private:
            event.access_code = None

    if "custom_fields" in patch_data:
        event.custom_fields = [
            f.model_dump(mode="json", exclude_none=True) for f in patch.custom_fields or []
        ]

    if "is_official" in patch_data and patch_data["is_official"] is not None:
        event.is_official = patch_data["is_official"]

    try:
        db.commit()
    except StaleDataError as exc:
        db.rollback()
        raise ConflictError(
            ErrorCode.CONCURRENT_UPDATE, "event was modified concurrently, please retry"
        ) from exc

    db.refresh(event)
    logger.info("event_updated", event_id=event.id, fields=sorted(patch_data))
    return event


def delete_event(
    db: Session,
    principal: Principal | None,
    event_id: str,
    storage: StorageAdapter | None = None,
) -> None:
    """Delete an event together with its registrations, chat and photos."""
    editor = require_principal(principal)
    event = get_event(db, event_id)
    _require_manage_permission(editor, event)

    photo_keys = list(db.scalars(select(Photo.storage_key).where(Photo.event_id == event.id)))

    db.execute(delete(Registration).where(Registration.event_id == event.id))
    db.execute(delete(ChatMessage).where(ChatMessage.event_id == event.id))
    db.execute(delete(Photo).where(Photo.event_id == event.id))
    db.delete(event)
    try:
        db.commit()
    except StaleDataError as exc:
        db.rollback()
        raise ConflictError(
            ErrorCode.CONCURRENT_UPDATE, "event was modified concurrently, please retry"
        ) from exc

    if storage is not None:
        for key in photo_keys:
            storage.delete(key)

    logger.info("event_deleted", event_id=event_id, photos_removed=len(photo_keys))
