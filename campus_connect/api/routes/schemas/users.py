from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from campus_connect.api.routes.schemas.base import SchemaBase
from campus_connect.models.user import UserRole


class PrincipalOut(SchemaBase):
    identity_provider: str
    user_id: str
    user_details: str
    user_roles: list[str]


class NotificationPreferences(SchemaBase):
    email: bool = True
    push: bool = True
    event_reminders: bool = True
    new_events: bool = True


class PrivacyPreferences(SchemaBase):
    show_email: bool = False
    show_profile: bool = True


class UserPreferences(SchemaBase):
    notifications: NotificationPreferences = Field(default_factory=NotificationPreferences)
    privacy: PrivacyPreferences = Field(default_factory=PrivacyPreferences)


class UserCreate(SchemaBase):
    email: str | None = None
    name: str | None = None
    department: str | None = None
    student_id: str | None = None
    faculty_id: str | None = None
    profile_picture: str | None = None


class UserUpdate(SchemaBase):
    email: str | None = None
    name: str | None = None
    department: str | None = None
    student_id: str | None = None
    faculty_id: str | None = None
    profile_picture: str | None = None
    preferences: UserPreferences | None = None


class UserOut(SchemaBase):
    id: str
    email: str
    name: str
    role: UserRole
    department: str | None = None
    student_id: str | None = None
    faculty_id: str | None = None
    profile_picture: str | None = None
    preferences: dict[str, Any]
    created_at: datetime
    updated_at: datetime
