from __future__ import annotations

from pathlib import Path

from .interfaces import DocumentFileStore
from .json_store import atomic_write_text, read_text
from .locks import GLOBAL_PATH_LOCKS


class DiskDocumentStore(DocumentFileStore):
    """
    Stores a single serialized document on disk at a fixed path.

    - Returns None on a missing or blank file.
    - Writes the whole file every time, atomically.
    """

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def read_text(self) -> str | None:
        lock = GLOBAL_PATH_LOCKS.lock_for(self._path)
        with lock:
            return read_text(self._path)

    def write_text(self, text: str) -> None:
        lock = GLOBAL_PATH_LOCKS.lock_for(self._path)
        with lock:
            atomic_write_text(self._path, text)
