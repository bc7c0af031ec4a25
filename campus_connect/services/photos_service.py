from __future__ import annotations

import re
from pathlib import Path
from typing import BinaryIO

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from campus_connect.auth.principal import Principal
from campus_connect.core.config import settings
from campus_connect.models import Photo
from campus_connect.models.base import new_id
from campus_connect.services.error_codes import ErrorCode
from campus_connect.services.events_service import get_event, require_principal
from campus_connect.services.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from campus_connect.services.registration_service import is_participant
from campus_connect.storage.base import StorageAdapter, StorageLimitExceeded

logger = structlog.get_logger(__name__)

ALLOWED_MIME_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
FILENAME_SANITIZE_RE = re.compile(r"[^A-Za-z0-9._-]+")


def _safe_filename(raw_filename: str | None) -> str:
    fallback = "photo"
    candidate = (raw_filename or fallback).strip()
    candidate = Path(candidate).name
    candidate = FILENAME_SANITIZE_RE.sub("_", candidate)
    candidate = candidate.strip("._") or fallback
    if len(candidate) > 200:
        stem = Path(candidate).stem[:160] or fallback
        suffix = Path(candidate).suffix[:20]
        candidate = f"{stem}{suffix}"
    return candidate


def get_photo(db: Session, photo_id: str) -> Photo:
    photo = db.get(Photo, photo_id)
    if not photo:
        raise NotFoundError(ErrorCode.PHOTO_NOT_FOUND, "Photo not found")
    return photo


def list_photos(db: Session, event_id: str) -> list[Photo]:
    event = get_event(db, event_id)
    return list(
        db.scalars(
            select(Photo)
            .where(Photo.event_id == event.id)
            .order_by(Photo.uploaded_at.desc())
        ).all()
    )


def upload_photo(
    db: Session,
    storage: StorageAdapter,
    principal: Principal | None,
    event_id: str,
    fileobj: BinaryIO,
    filename: str | None,
    content_type: str | None,
    caption: str | None = None,
) -> Photo:
    uploader = require_principal(principal)
    event = get_event(db, event_id)

    if not is_participant(db, event, uploader.user_id):
        raise PermissionDeniedError(message="register for the event to share photos")

    mime_type = (content_type or "").lower()
    if mime_type not in ALLOWED_MIME_TYPES:
        raise ValidationError(ErrorCode.INVALID_FILE, "only jpeg, png, gif or webp images are allowed")

    safe_filename = _safe_filename(filename)
    if Path(safe_filename).suffix.lower() not in ALLOWED_EXTENSIONS:
        raise ValidationError(ErrorCode.INVALID_FILE, "unsupported image file extension")

    photo_id = new_id()
    key = f"photos/{event.id}/{photo_id}/{safe_filename}"
    try:
        stored = storage.put_file(key, fileobj, max_bytes=settings.photo_max_upload_bytes)
    except StorageLimitExceeded as exc:
        raise ValidationError(
            ErrorCode.FILE_TOO_LARGE,
            f"file exceeds max size of {exc.limit} bytes",
        ) from exc

    if stored.size == 0:
        storage.delete(key)
        raise ValidationError(ErrorCode.INVALID_FILE, "uploaded file is empty")

    photo = Photo(
        id=photo_id,
        event_id=event.id,
        user_id=uploader.user_id,
        user_name=uploader.display_name,
        file_name=safe_filename,
        storage_key=stored.key,
        storage_uri=stored.uri,
        mime_type=mime_type,
        size_bytes=stored.size,
        caption=(caption or "").strip(),
    )
    db.add(photo)
    try:
        db.commit()
    except Exception:
        db.rollback()
        storage.delete(key)
        raise

    db.refresh(photo)
    logger.info("photo_uploaded", event_id=event.id, photo_id=photo.id, size=stored.size)
    return photo


def open_photo(db: Session, storage: StorageAdapter, photo_id: str) -> tuple[Photo, BinaryIO]:
    photo = get_photo(db, photo_id)
    if not storage.exists(photo.storage_key):
        raise NotFoundError(ErrorCode.PHOTO_NOT_FOUND, "Photo file not found")
    return photo, storage.open(photo.storage_key)


def delete_photo(
    db: Session, storage: StorageAdapter, principal: Principal | None, photo_id: str
) -> None:
    user = require_principal(principal)
    photo = get_photo(db, photo_id)
    if photo.user_id != user.user_id and not user.is_admin:
        raise PermissionDeniedError(message="only the uploader can delete this photo")

    key = photo.storage_key
    db.delete(photo)
    db.commit()
    storage.delete(key)
    logger.info("photo_deleted", photo_id=photo_id)
