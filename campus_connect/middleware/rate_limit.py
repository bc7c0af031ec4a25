from __future__ import annotations

import time

import structlog
from fastapi import Request
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from campus_connect.api.errors import error_response
from campus_connect.auth.principal import parse_client_principal
from campus_connect.core.config import settings
from campus_connect.redis_client import get_redis

logger = structlog.get_logger(__name__)

WINDOWS = {
    "sec": 1,
    "second": 1,
    "seconds": 1,
    "min": 60,
    "minute": 60,
    "minutes": 60,
    "hour": 3600,
    "hours": 3600,
    "day": 86400,
    "days": 86400,
}


def parse_rate(rate: str) -> tuple[int, int]:
    """Parse "60/minute" style rates into (limit, window_seconds)."""
    raw = rate.strip().lower()
    if "/" not in raw:
        raise ValueError(f"Invalid rate format: {rate}")

    limit_str, window_str = raw.split("/", 1)
    limit = int(limit_str)
    window = WINDOWS.get(window_str.strip())
    if window is None:
        raise ValueError(f"Invalid rate window: {window_str}")
    return limit, window


def client_identity(request: Request) -> str:
    # signed-in callers share a budget across devices; everyone else is keyed by IP
    principal = parse_client_principal(request.headers.get(settings.principal_header))
    if principal is not None:
        return f"user:{principal.user_id}"
    return f"ip:{request.client.host if request.client else 'unknown'}"


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        if not settings.rate_limit_enabled or request.method == "OPTIONS":
            return await call_next(request)

        path = request.url.path
        if path in set(settings.rate_limit_exempt_paths):
            return await call_next(request)

        try:
            limit, window_seconds = parse_rate(settings.rate_limit_default)
        except ValueError:
            logger.warning("rate_limit_misconfigured", rate=settings.rate_limit_default)
            return await call_next(request)

        now = int(time.time())
        bucket = now // window_seconds
        key = f"rl:{client_identity(request)}:{request.method}:{path}:{window_seconds}:{bucket}"

        try:
            r = get_redis()
            count = int(r.incr(key))
            if count == 1:
                r.expire(key, window_seconds)
        except RedisError:
            # fail open
            logger.warning("rate_limit_unavailable", path=path)
            return await call_next(request)

        reset = (bucket + 1) * window_seconds
        if count > limit:
            return error_response(
                429,
                "RATE_LIMITED",
                "Rate limit exceeded",
                headers={
                    "X-RateLimit-Limit": str(limit),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": str(reset),
                    "Retry-After": str(max(0, reset - now)),
                },
            )

        response = await call_next(request)
        response.headers.setdefault("X-RateLimit-Limit", str(limit))
        response.headers.setdefault("X-RateLimit-Remaining", str(max(0, limit - count)))
        response.headers.setdefault("X-RateLimit-Reset", str(reset))
        return response
