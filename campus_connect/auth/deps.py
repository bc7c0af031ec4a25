from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import Depends, Request

from campus_connect.auth.principal import Principal, parse_client_principal
from campus_connect.core.config import settings
from campus_connect.services.exceptions import UnauthorizedError


def get_optional_principal(request: Request) -> Principal | None:
    principal = parse_client_principal(request.headers.get(settings.principal_header))
    if principal is not None:
        structlog.contextvars.bind_contextvars(user_id=principal.user_id)
    return principal


def get_current_principal(
    principal: Annotated[Principal | None, Depends(get_optional_principal)],
) -> Principal:
    if principal is None:
        raise UnauthorizedError()
    return principal


OptionalPrincipal = Annotated[Principal | None, Depends(get_optional_principal)]
CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
