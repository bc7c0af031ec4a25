from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass, field
from typing import Any

FACULTY_ROLE = "faculty"
ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class Principal:
    """Caller identity decoded from the platform's client-principal header."""

    user_id: str
    user_details: str = ""
    identity_provider: str = ""
    roles: frozenset[str] = field(default_factory=frozenset)
    email: str | None = None

    @property
    def display_name(self) -> str:
        return self.user_details or "Unknown User"

    def has_role(self, role: str) -> bool:
        return role in self.roles

    @property
    def is_admin(self) -> bool:
        return self.has_role(ADMIN_ROLE)

    @property
    def is_faculty(self) -> bool:
        return self.has_role(FACULTY_ROLE)

    def to_dict(self) -> dict[str, Any]:
        return {
            "identityProvider": self.identity_provider,
            "userId": self.user_id,
            "userDetails": self.user_details,
            "userRoles": sorted(self.roles),
        }


def _email_from(obj: dict[str, Any], user_details: str) -> str | None:
    email = obj.get("email")
    if isinstance(email, str) and "@" in email:
        return email.strip()
    # AAD puts the sign-in address in userDetails
    if "@" in user_details:
        return user_details
    return None


def parse_client_principal(header_value: str | None) -> Principal | None:
    """Decode a base64 JSON principal.

    Anything that does not decode to an object with a non-empty ``userId``
    is treated the same as a missing header: anonymous (``None``).
    """
    if not header_value:
        return None
    try:
        decoded = base64.b64decode(header_value.strip(), validate=False).decode("utf-8")
        obj = json.loads(decoded)
    except (binascii.Error, UnicodeDecodeError, ValueError, RecursionError):
        return None

    if not isinstance(obj, dict):
        return None

    user_id = obj.get("userId")
    if not isinstance(user_id, str) or not user_id.strip():
        return None

    raw_roles = obj.get("userRoles")
    roles = frozenset(
        str(role).strip().lower()
        for role in (raw_roles if isinstance(raw_roles, list) else [])
        if str(role).strip()
    )
    user_details = obj.get("userDetails")
    user_details = user_details.strip() if isinstance(user_details, str) else ""
    provider = obj.get("identityProvider")

    return Principal(
        user_id=user_id.strip(),
        user_details=user_details,
        identity_provider=provider if isinstance(provider, str) else "",
        roles=roles,
        email=_email_from(obj, user_details),
    )


def encode_client_principal(
    user_id: str,
    user_details: str = "",
    roles: list[str] | None = None,
    identity_provider: str = "aad",
    email: str | None = None,
) -> str:
    """Build a header value; used by local tooling and the test suite."""
    payload: dict[str, Any] = {
        "identityProvider": identity_provider,
        "userId": user_id,
        "userDetails": user_details,
        "userRoles": roles if roles is not None else ["anonymous", "authenticated"],
    }
    if email:
        payload["email"] = email
    return base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")
