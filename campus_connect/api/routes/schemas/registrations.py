from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from campus_connect.api.routes.schemas.base import SchemaBase


class RegistrationCreate(SchemaBase):
    registration_data: dict[str, Any] = Field(default_factory=dict)


class RegistrationOut(SchemaBase):
    id: str
    event_id: str
    user_id: str
    user_name: str
    user_email: str | None = None
    registration_data: dict[str, Any]
    registered_at: datetime


class RegistrationStatusOut(SchemaBase):
    is_registered: bool
    current_attendees: int | None = None
    max_attendees: int | None = None
    is_full: bool | None = None
