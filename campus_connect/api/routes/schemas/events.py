from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Any

from pydantic import Field, field_validator, model_validator

from campus_connect.api.routes.schemas.base import SchemaBase
from campus_connect.models.event import EventCategory


class CustomFieldType(str, Enum):
    TEXT = "text"
    EMAIL = "email"
    NUMBER = "number"
    SELECT = "select"
    TEXTAREA = "textarea"


class Coordinates(SchemaBase):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class CustomField(SchemaBase):
    id: str = Field(min_length=1)
    label: str = Field(min_length=1)
    type: CustomFieldType = CustomFieldType.TEXT
    required: bool = False
    options: list[str] | None = None

    @model_validator(mode="after")
    def _select_needs_options(self):
        if self.type == CustomFieldType.SELECT and not self.options:
            raise ValueError("select fields need at least one option")
        return self


def _unique_field_ids(fields: list[CustomField] | None) -> list[CustomField] | None:
    if fields is None:
        return fields
    ids = [f.id for f in fields]
    if len(ids) != len(set(ids)):
        raise ValueError("custom field ids must be unique")
    return fields


class EventCreate(SchemaBase):
    # Everything is optional here so missing fields are reported together by
    # the service as a 400, not field-by-field by the validator.
    title: str | None = None
    description: str | None = None
    date: dt.date | None = None
    time: dt.time | None = None
    location: str | None = None
    coordinates: Coordinates | None = None
    category: EventCategory | None = None
    is_private: bool | None = None
    capacity: int | None = Field(default=None, ge=1)
    is_official: bool | None = None
    custom_fields: list[CustomField] | None = None

    @field_validator("custom_fields")
    @classmethod
    def _validate_custom_fields(cls, value):
        return _unique_field_ids(value)


class EventUpdate(SchemaBase):
    title: str | None = None
    description: str | None = None
    date: dt.date | None = None
    time: dt.time | None = None
    location: str | None = None
    coordinates: Coordinates | None = None
    category: EventCategory | None = None
    is_private: bool | None = None
    capacity: int | None = Field(default=None, ge=1)
    is_official: bool | None = None
    custom_fields: list[CustomField] | None = None

    @field_validator("custom_fields")
    @classmethod
    def _validate_custom_fields(cls, value):
        return _unique_field_ids(value)


class EventOut(SchemaBase):
    id: str
    title: str
    description: str
    date: dt.date
    time: dt.time
    location: str
    coordinates: Coordinates | None = None
    category: EventCategory
    is_private: bool
    access_code: str | None = None
    capacity: int | None = None
    creator_id: str
    creator_name: str
    is_official: bool
    attendees: list[str]
    custom_fields: list[dict[str, Any]]
    created_at: dt.datetime
    updated_at: dt.datetime
