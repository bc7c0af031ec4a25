from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Any

import sqlalchemy as sa
from sqlalchemy import JSON, Boolean, Date, Float, Integer, String, Text, Time
from sqlalchemy.orm import Mapped, mapped_column

from campus_connect.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class EventCategory(str, Enum):
    ACADEMIC = "academic"
    SOCIAL = "social"
    SPORTS = "sports"
    CULTURAL = "cultural"
    OTHER = "other"


class Event(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "events"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    time: Mapped[dt.time] = mapped_column(Time, nullable=False)
    location: Mapped[str] = mapped_column(String(300), nullable=False)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)

    category: Mapped[EventCategory] = mapped_column(
        sa.Enum(
            EventCategory,
            name="event_category",
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
        default=EventCategory.OTHER,
    )

    is_private: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Generated for private events; stored but not checked anywhere yet
    access_code: Mapped[str | None] = mapped_column(String(16), nullable=True)

    # None means unlimited
    capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)

    creator_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    creator_name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_official: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Ordered user ids; always reassigned (never mutated in place) so the
    # change is picked up on flush.
    attendees: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    custom_fields: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )

    # Bumped on every UPDATE; a stale version makes the flush fail with
    # StaleDataError instead of silently overwriting a concurrent write.
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    @property
    def coordinates(self) -> dict[str, float] | None:
        if self.latitude is None or self.longitude is None:
            return None
        return {"latitude": self.latitude, "longitude": self.longitude}

    @property
    def starts_at(self) -> dt.datetime:
        return dt.datetime.combine(self.date, self.time)
