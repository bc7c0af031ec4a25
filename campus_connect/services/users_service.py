from __future__ import annotations

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campus_connect.api.routes.schemas.users import UserCreate, UserUpdate
from campus_connect.auth.principal import Principal
from campus_connect.models import Registration, User
from campus_connect.models.user import UserRole, default_preferences
from campus_connect.services.error_codes import ErrorCode
from campus_connect.services.events_service import require_principal
from campus_connect.services.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

logger = structlog.get_logger(__name__)


def _normalize_email(value: str | None) -> str | None:
    if value is None:
        return None
    email = value.strip().lower()
    return email or None


def _normalize_text(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip()
    return normalized or None


def role_for(principal: Principal) -> UserRole:
    if principal.is_admin:
        return UserRole.ADMIN
    if principal.is_faculty:
        return UserRole.FACULTY
    return UserRole.STUDENT


def _require_self_or_admin(principal: Principal, user_id: str) -> None:
    if principal.user_id != user_id and not principal.is_admin:
        raise PermissionDeniedError()


def _email_taken(db: Session, email: str, exclude_user_id: str | None = None) -> bool:
    stmt = select(User.id).where(User.email == email)
    if exclude_user_id is not None:
        stmt = stmt.where(User.id != exclude_user_id)
    return db.scalar(stmt.limit(1)) is not None


def get_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError(ErrorCode.USER_NOT_FOUND, "User not found")
    return user


def get_user_by_email(db: Session, email: str | None) -> User:
    normalized = _normalize_email(email)
    user = db.scalar(select(User).where(User.email == normalized)) if normalized else None
    if not user:
        raise NotFoundError(ErrorCode.USER_NOT_FOUND, "User not found")
    return user


def create_user(db: Session, principal: Principal | None, payload: UserCreate) -> User:
    owner = require_principal(principal)

    email = _normalize_email(payload.email)
    name = _normalize_text(payload.name)
    missing = [label for label, value in (("email", email), ("name", name)) if not value]
    if missing:
        raise ValidationError(
            ErrorCode.MISSING_FIELDS, f"Missing required fields: {', '.join(missing)}"
        )
    if "@" not in email:
        raise ValidationError(ErrorCode.INVALID_INPUT, "email is not valid")

    if db.get(User, owner.user_id) is not None:
        raise ConflictError(ErrorCode.PROFILE_EXISTS, "Profile already exists for this user")
    if _email_taken(db, email):
        raise ConflictError(ErrorCode.EMAIL_TAKEN, "User already exists with this email")

    user = User(
        id=owner.user_id,
        email=email,
        name=name,
        role=role_for(owner),
        department=_normalize_text(payload.department),
        student_id=_normalize_text(payload.student_id),
        faculty_id=_normalize_text(payload.faculty_id),
        profile_picture=_normalize_text(payload.profile_picture),
        preferences=default_preferences(),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(ErrorCode.EMAIL_TAKEN, "User already exists with this email") from exc

    db.refresh(user)
    logger.info("user_created", user_id=user.id, role=user.role.value)
    return user


def update_user(
    db: Session, principal: Principal | None, user_id: str, patch: UserUpdate
) -> User:
    editor = require_principal(principal)
    _require_self_or_admin(editor, user_id)
    user = get_user(db, user_id)

    updates = patch.model_dump(exclude_unset=True)

    if "email" in updates:
        email = _normalize_email(updates["email"])
        if not email or "@" not in email:
            raise ValidationError(ErrorCode.INVALID_INPUT, "email is not valid")
        if _email_taken(db, email, exclude_user_id=user.id):
            raise ConflictError(ErrorCode.EMAIL_TAKEN, "User already exists with this email")
        user.email = email

    if "name" in updates:
        name = _normalize_text(updates["name"])
        if not name:
            raise ValidationError(ErrorCode.MISSING_FIELDS, "name cannot be empty")
        user.name = name

    for key in ("department", "student_id", "faculty_id", "profile_picture"):
        if key in updates:
            setattr(user, key, _normalize_text(updates[key]))

    if patch.preferences is not None:
        user.preferences = patch.preferences.model_dump(by_alias=True)

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(ErrorCode.EMAIL_TAKEN, "User already exists with this email") from exc

    db.refresh(user)
    logger.info("user_updated", user_id=user.id, fields=sorted(updates))
    return user


def list_user_registrations(
    db: Session, principal: Principal | None, user_id: str
) -> list[Registration]:
    viewer = require_principal(principal)
    _require_self_or_admin(viewer, user_id)
    return list(
        db.scalars(
            select(Registration)
            .where(Registration.user_id == user_id)
            .order_by(Registration.registered_at.desc())
        ).all()
    )
