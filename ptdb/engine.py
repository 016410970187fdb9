from __future__ import annotations

import asyncio
import contextlib
import logging
from pathlib import Path
from typing import Any, AsyncIterator, Mapping

from . import tree
from .disk_store import DiskDocumentStore
from .document import Document, DocumentInfo
from .errors import CorruptedStoreError, InvalidValueError, NotLoadedError, WriteFailureError
from .interfaces import DocumentFileStore
from .json_store import content_hash
from .locks import GLOBAL_OPEN_REGISTRY, OpenInstanceRegistry
from .notifications import Event, Handler, Notifier
from .paths import ROOT, PathLike, ResolvedPath, RootPath, backing_file, resolve
from .scheduler import SyncScheduler
from .settings import Settings, get_settings
from .watchers import WatchHandler, WatchRegistry

logger = logging.getLogger(__name__)


class DocumentDB:
    """
    One hierarchical document held in memory and flushed whole to <path>.ptsb.

    Every mutating call saves before returning, unless it runs inside batch().
    A save only reaches disk when the serialized document differs from the last
    one written; watches are evaluated after each save that did.
    """

    def __init__(
        self,
        path: Path | str,
        *,
        sync_interval: int | None = None,
        registry: OpenInstanceRegistry | None = None,
        store: DocumentFileStore | None = None,
        settings: Settings | None = None,
    ):
        if sync_interval is None:
            sync_interval = (settings or get_settings()).sync_interval_ms

        self.path = Path(path)
        self.filename = backing_file(path)
        self.sync_interval = sync_interval
        self.loaded = False
        self.closed = False

        self._registry = GLOBAL_OPEN_REGISTRY if registry is None else registry
        self._store = DiskDocumentStore(self.filename) if store is None else store
        self._doc: Document | None = None
        self._hash: str | None = None
        self._batch_depth = 0
        self._save_lock = asyncio.Lock()
        self._scheduler = SyncScheduler(sync_interval, self._scheduled_save)
        self._notifier = Notifier()
        self._watches = WatchRegistry()

    async def __aenter__(self) -> "DocumentDB":
        await self.load()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        if self._doc is not None:
            await self.close()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def syncing(self) -> bool:
        return self._scheduler.running

    @property
    def dirty_hash(self) -> str | None:
        return self._hash

    @property
    def info(self) -> DocumentInfo:
        return self._require_doc().info.model_copy()

    async def load(self) -> None:
        self._registry.acquire(self.filename)
        try:
            self._doc = await self._read_document()
        except BaseException:
            self._registry.release(self.filename)
            raise

        self._hash = content_hash(self._doc.serialize())
        self._watches.seed(self._read_lenient)
        await self.save()
        self._scheduler.start()
        self.loaded = True
        self.closed = False
        logger.info("PTDB LOAD: opened %s (sync every %d ms)", self.filename, self.sync_interval)
        self._notifier.emit(Event.LOADED)

    async def _read_document(self) -> Document:
        try:
            text = await asyncio.to_thread(self._store.read_text)
        except OSError as e:
            # Treated like a missing file; the next save will try to create it.
            logger.warning("PTDB LOAD: could not read %s, starting empty: %r", self.filename, e)
            text = None

        if text is None:
            return Document()
        try:
            return Document.parse(text)
        except ValueError as e:
            raise CorruptedStoreError(str(self.filename), str(e)) from e

    async def save(self) -> bool:
        """
        Write the document if it changed since the last write.

        Returns False when the save was a no-op.
        """
        self._require_doc()
        # One save at a time, so the last save to start is the last to reach disk.
        async with self._save_lock:
            doc = self._require_doc()
            if content_hash(doc.serialize()) == self._hash:
                logger.debug("PTDB SAVE: %s unchanged, skipping write", self.filename)
                return False

            doc.touch()
            serialized = doc.serialize()
            self._hash = content_hash(serialized)
            try:
                await asyncio.to_thread(self._store.write_text, serialized)
            except OSError as e:
                # Forget the hash so the next save retries the write.
                self._hash = None
                raise WriteFailureError(str(self.filename)) from e

            self._notifier.emit(Event.SAVED)
            if self._doc is not None:
                fired = self._watches.evaluate(self._read_lenient, self._notifier)
                if fired:
                    logger.debug("PTDB SAVE: %s changed watched paths %s", self.filename, fired)
            return True

    async def _scheduled_save(self) -> None:
        if self._doc is not None:
            await self.save()

    async def close(self) -> None:
        self._require_doc()
        await self.save()

        self._doc = None
        self._hash = None
        await self._scheduler.stop()
        self._registry.release(self.filename)
        self.loaded = False
        self.closed = True
        logger.info("PTDB CLOSE: closed %s", self.filename)
        self._notifier.emit(Event.CLOSED)

    @contextlib.asynccontextmanager
    async def batch(self) -> AsyncIterator["DocumentDB"]:
        """
        Defer saves for mutations made inside the block; save once on exit.
        """
        self._require_doc()
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
        if self._batch_depth == 0:
            await self.save()

    # ------------------------------------------------------------------
    # Reads and mutations
    # ------------------------------------------------------------------
    def read(self, path: PathLike = ROOT) -> Any:
        """Value at path (a copy), or None if nothing is there."""
        doc = self._require_doc()
        return tree.read(doc.records, resolve(path))

    async def write(self, path: PathLike, value: Any) -> Any:
        doc = self._require_doc()
        resolved = resolve(path)
        if isinstance(resolved, RootPath):
            if not isinstance(value, Mapping):
                raise InvalidValueError(ROOT, "the root can only hold a mapping")
            doc.records = tree.normalize(value, resolved)
            result = tree.read(doc.records, resolved)
        else:
            result = tree.write(doc.records, resolved, value)
        await self._mutated()
        return result

    async def push(self, path: PathLike, value: Any) -> list[Any]:
        result = tree.push(self._require_doc().records, resolve(path), value)
        await self._mutated()
        return result

    async def unshift(self, path: PathLike, value: Any) -> list[Any]:
        result = tree.unshift(self._require_doc().records, resolve(path), value)
        await self._mutated()
        return result

    async def pop(self, path: PathLike) -> Any:
        result = tree.pop(self._require_doc().records, resolve(path))
        await self._mutated()
        return result

    async def shift(self, path: PathLike) -> Any:
        result = tree.shift(self._require_doc().records, resolve(path))
        await self._mutated()
        return result

    async def unset(self, path: PathLike) -> None:
        doc = self._require_doc()
        resolved = resolve(path)
        if isinstance(resolved, RootPath):
            doc.records = {}
        else:
            tree.unset(doc.records, resolved)
        # Nothing removed means nothing changed; the hash gate makes the save a no-op.
        await self._mutated()

    async def _mutated(self) -> None:
        if self._batch_depth == 0:
            await self.save()

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def subscribe(self, event: Event | str, handler: Handler) -> None:
        self._notifier.subscribe(event, handler)

    def unsubscribe(self, event: Event | str, handler: Handler) -> None:
        self._notifier.unsubscribe(event, handler)

    def watch(self, path: PathLike, handler: WatchHandler) -> None:
        """
        Call handler(new_value, previous_value, path) after any save that changed path.
        """
        read = self._read_lenient if self._doc is not None else None
        self._watches.watch(path, handler, read)

    def unwatch(self, path: PathLike) -> None:
        """Drop every handler watching path."""
        self._watches.unwatch(path)

    async def drain(self) -> None:
        """Wait for every notification scheduled so far to be delivered."""
        await self._notifier.drain()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _require_doc(self) -> Document:
        if self._doc is None:
            raise NotLoadedError(str(self.filename))
        return self._doc

    def _read_lenient(self, path: ResolvedPath) -> Any:
        return tree.read_lenient(self._require_doc().records, path)
