from __future__ import annotations

import os
import tempfile
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from campus_connect.storage.base import StorageAdapter, StorageLimitExceeded, StoredObject

CHUNK_SIZE = 1024 * 1024


class LocalStorageAdapter(StorageAdapter):
    def __init__(self, root: Path) -> None:
        self._root = root.resolve()
        self._root.mkdir(parents=True, exist_ok=True)

    def _normalize_key(self, key: str) -> str:
        normalized = key.strip().lstrip("/")
        path_key = PurePosixPath(normalized)
        if not normalized or path_key.is_absolute() or ".." in path_key.parts:
            raise ValueError(f"invalid storage key: {key!r}")
        return str(path_key)

    def _path_for_key(self, key: str) -> Path:
        normalized = self._normalize_key(key)
        return self._root.joinpath(*PurePosixPath(normalized).parts)

    def put_file(self, key: str, fileobj: BinaryIO, max_bytes: int | None = None) -> StoredObject:
        path = self._path_for_key(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        # Write next to the target and rename, so readers never see a partial file
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".upload-")
        size = 0
        try:
            with os.fdopen(fd, "wb") as out:
                while True:
                    chunk = fileobj.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if max_bytes is not None and size > max_bytes:
                        raise StorageLimitExceeded(max_bytes)
                    out.write(chunk)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        return StoredObject(key=self._normalize_key(key), uri=self.resolve_uri(key), size=size)

    def open(self, key: str) -> BinaryIO:
        return self._path_for_key(key).open("rb")

    def delete(self, key: str) -> None:
        self._path_for_key(key).unlink(missing_ok=True)

    def exists(self, key: str) -> bool:
        return self._path_for_key(key).exists()

    def resolve_uri(self, key: str) -> str:
        normalized = self._normalize_key(key)
        return f"local://{normalized}"
