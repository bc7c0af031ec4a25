from __future__ import annotations

from enum import Enum
from typing import Any

import sqlalchemy as sa
from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from campus_connect.models.base import Base, TimestampMixin


class UserRole(str, Enum):
    STUDENT = "student"
    FACULTY = "faculty"
    ADMIN = "admin"


def default_preferences() -> dict[str, Any]:
    return {
        "notifications": {
            "email": True,
            "push": True,
            "eventReminders": True,
            "newEvents": True,
        },
        "privacy": {
            "showEmail": False,
            "showProfile": True,
        },
    }


class User(Base, TimestampMixin):
    __tablename__ = "users"

    # Same id as the identity provider's principal
    id: Mapped[str] = mapped_column(String(128), primary_key=True)

    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        sa.Enum(
            UserRole,
            name="user_role",
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
        default=UserRole.STUDENT,
    )
    department: Mapped[str | None] = mapped_column(String(200), nullable=True)
    student_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    faculty_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    profile_picture: Mapped[str | None] = mapped_column(String(500), nullable=True)
    preferences: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=default_preferences
    )
