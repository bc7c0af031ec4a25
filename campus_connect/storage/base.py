from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO


class StorageLimitExceeded(Exception):
    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"object exceeds max size of {limit} bytes")


@dataclass(frozen=True)
class StoredObject:
    key: str
    uri: str
    size: int


class StorageAdapter(ABC):
    @abstractmethod
    def put_file(self, key: str, fileobj: BinaryIO, max_bytes: int | None = None) -> StoredObject:
        """Store content from a file-like object under key.

        Raises StorageLimitExceeded (leaving nothing behind) when more than
        max_bytes are read.
        """

    @abstractmethod
    def open(self, key: str) -> BinaryIO:
        """Open key for reading in binary mode."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete key if it exists."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Return whether key exists."""

    @abstractmethod
    def resolve_uri(self, key: str) -> str:
        """Return canonical storage URI for a key."""
