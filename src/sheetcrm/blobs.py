"""Key/value text storage used for persisted config and mock-mode data.

Values are opaque strings (the callers store JSON text).  Reads of a
missing key return ``None``; nothing here guards against concurrent
writers, the stores are single-user by construction.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Protocol

_logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class BlobStore(Protocol):
    """Structural interface for named text blobs."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryBlobStore:
    """Process-local blob store (tests, throwaway demo sessions)."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._blobs: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._blobs.get(key)

    def set(self, key: str, value: str) -> None:
        self._blobs[key] = value

    def delete(self, key: str) -> None:
        self._blobs.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._blobs)


class FileBlobStore:
    """Blob store keeping one ``<key>.json`` file per entry in *root*."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"invalid blob key: {key!r}")
        return self._root / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        self._root.mkdir(parents=True, exist_ok=True)
        # Atomic replace: readers see the old blob or the new one, never a partial write.
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(path)
        _logger.debug("Wrote blob %s (%d chars)", key, len(value))

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
