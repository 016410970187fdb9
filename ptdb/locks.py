from __future__ import annotations

import threading
from pathlib import Path

from .errors import AlreadyOpenError


class PathLockRegistry:
    """
    Provides a stable lock per normalized file path so file writes never interleave.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def lock_for(self, path: Path) -> threading.Lock:
        key = str(path.resolve())
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock


GLOBAL_PATH_LOCKS = PathLockRegistry()


class OpenInstanceRegistry:
    """
    Tracks which backing files are held by a live engine in this process.

    Advisory only: other processes are not aware of it.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._held: set[str] = set()

    @staticmethod
    def key_for(path: Path) -> str:
        return str(path.resolve())

    def acquire(self, path: Path) -> None:
        key = self.key_for(path)
        with self._guard:
            if key in self._held:
                raise AlreadyOpenError(key)
            self._held.add(key)

    def release(self, path: Path) -> None:
        with self._guard:
            self._held.discard(self.key_for(path))

    def is_held(self, path: Path) -> bool:
        with self._guard:
            return self.key_for(path) in self._held


GLOBAL_OPEN_REGISTRY = OpenInstanceRegistry()
