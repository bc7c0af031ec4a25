from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import structlog

from campus_connect.core.config import settings
from campus_connect.storage.base import StorageAdapter
from campus_connect.storage.local import LocalStorageAdapter

logger = structlog.get_logger(__name__)

BACKENDS: dict[str, type[LocalStorageAdapter]] = {
    "local": LocalStorageAdapter,
}


def create_storage(
    backend: str | None = None,
    root: str | Path | None = None,
) -> StorageAdapter:
    name = (backend or settings.storage_backend).strip().lower()
    adapter_cls = BACKENDS.get(name)
    if adapter_cls is None:
        raise ValueError(f"unsupported storage backend: {name}")
    storage_root = Path(root or settings.storage_root)
    logger.info("photo_storage_ready", backend=name, root=str(storage_root))
    return adapter_cls(storage_root)


@lru_cache(maxsize=1)
def get_storage() -> StorageAdapter:
    """Process-wide photo storage, injected into routes with Depends."""
    return create_storage()
