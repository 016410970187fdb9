from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from .document import hash_value
from .notifications import Notifier
from .paths import PathLike, ResolvedPath, resolve

logger = logging.getLogger(__name__)

# (new_value, previous_value, path)
WatchHandler = Callable[[Any, Any, str], Any]
Reader = Callable[[ResolvedPath], Any]


@dataclass
class WatchEntry:
    path: ResolvedPath
    handlers: list[WatchHandler] = field(default_factory=list)
    last_hash: str | None = None
    last_value: Any = None


class WatchRegistry:
    """
    Per-path subscriptions with the last seen value.

    Change detection happens in evaluate(), which the engine runs after each
    save that actually reached disk. Several changes between two saves produce
    one notification.
    """

    def __init__(self) -> None:
        self._entries: dict[str, WatchEntry] = {}

    def watch(self, path: PathLike, handler: WatchHandler, read: Reader | None = None) -> WatchEntry:
        resolved = resolve(path)
        key = str(resolved)
        entry = self._entries.get(key)
        if entry is None:
            entry = WatchEntry(path=resolved)
            if read is not None:
                self._snapshot(entry, read)
            self._entries[key] = entry
        entry.handlers.append(handler)
        return entry

    def seed(self, read: Reader) -> None:
        """Take every entry's current value as its baseline, e.g. when a document is loaded."""
        for entry in self._entries.values():
            self._snapshot(entry, read)

    @staticmethod
    def _snapshot(entry: WatchEntry, read: Reader) -> None:
        value = read(entry.path)
        entry.last_value = value
        entry.last_hash = hash_value(value)

    def unwatch(self, path: PathLike) -> None:
        self._entries.pop(str(resolve(path)), None)

    def evaluate(self, read: Reader, notifier: Notifier) -> list[str]:
        """Compare every watched value with its last snapshot; returns the paths that fired."""
        fired = []
        for key, entry in list(self._entries.items()):
            value = read(entry.path)
            new_hash = hash_value(value)
            if new_hash == entry.last_hash:
                continue
            previous = entry.last_value
            entry.last_hash = new_hash
            entry.last_value = value
            logger.debug("PTDB WATCH: %s changed, notifying %d handler(s)", key, len(entry.handlers))
            for handler in list(entry.handlers):
                notifier.dispatch(handler, copy.deepcopy(value), copy.deepcopy(previous), key)
            fired.append(key)
        return fired