from __future__ import annotations

import threading

from redis import Redis
from redis.connection import ConnectionPool

from campus_connect.core.config import settings

_pool: ConnectionPool | None = None
_pool_lock = threading.Lock()


def get_redis() -> Redis:
    global _pool
    if _pool is None:
        with _pool_lock:
            if _pool is None:
                _pool = ConnectionPool.from_url(
                    settings.redis_url,
                    decode_responses=True,
                    socket_connect_timeout=0.5,
                    socket_timeout=0.5,
                )
    return Redis(connection_pool=_pool)
