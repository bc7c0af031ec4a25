from __future__ import annotations

from campus_connect.storage.base import StorageAdapter, StorageLimitExceeded, StoredObject
from campus_connect.storage.factory import create_storage, get_storage
from campus_connect.storage.local import LocalStorageAdapter

__all__ = [
    "StorageAdapter",
    "StorageLimitExceeded",
    "StoredObject",
    "LocalStorageAdapter",
    "create_storage",
    "get_storage",
]
