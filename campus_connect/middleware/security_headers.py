from __future__ import annotations

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from campus_connect.core.config import settings

BASELINE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    # the map view asks for the browser location
    "Permissions-Policy": "geolocation=(self), microphone=(), camera=()",
}
HSTS_VALUE = "max-age=63072000; includeSubDomains"


def security_headers_for(path: str) -> dict[str, str]:
    headers = dict(BASELINE_HEADERS)
    if settings.env != "local":
        headers["Strict-Transport-Security"] = HSTS_VALUE
    # registration state and principals are per-caller; photo files may be cached
    if path.startswith(settings.api_prefix) and not path.endswith("/file"):
        headers["Cache-Control"] = "no-store"
    return headers


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response: Response = await call_next(request)
        if settings.security_headers_enabled:
            for name, value in security_headers_for(request.url.path).items():
                response.headers.setdefault(name, value)
        return response
