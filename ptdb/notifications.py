from __future__ import annotations

import asyncio
import inspect
import logging
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


class Event(str, Enum):
    LOADED = "loaded"
    SAVED = "saved"
    CLOSED = "closed"


class Notifier:
    """
    Explicit handler lists per lifecycle event.

    Handlers never run inside the call that triggered them: they are queued on
    the running loop with call_soon. A handler returning an awaitable gets it
    run as a task.
    """

    def __init__(self) -> None:
        self._handlers: dict[Event, list[Handler]] = {event: [] for event in Event}
        self._pending: set[asyncio.Future[Any]] = set()
        self._queued = 0

    def subscribe(self, event: Event | str, handler: Handler) -> None:
        self._handlers[Event(event)].append(handler)

    def unsubscribe(self, event: Event | str, handler: Handler) -> None:
        handlers = self._handlers[Event(event)]
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: Event) -> None:
        for handler in list(self._handlers[event]):
            self.dispatch(handler)

    def dispatch(self, handler: Handler, *args: Any) -> None:
        loop = asyncio.get_running_loop()
        self._queued += 1
        loop.call_soon(self._run, handler, args)

    def _run(self, handler: Handler, args: tuple[Any, ...]) -> None:
        self._queued -= 1
        try:
            result = handler(*args)
        except Exception:
            logger.warning("PTDB NOTIFY: handler %r failed", handler, exc_info=True)
            return
        if inspect.isawaitable(result):
            fut = asyncio.ensure_future(result)
            self._pending.add(fut)
            fut.add_done_callback(self._finished)

    def _finished(self, fut: asyncio.Future[Any]) -> None:
        self._pending.discard(fut)
        if fut.cancelled():
            return
        exc = fut.exception()
        if exc is not None:
            logger.warning("PTDB NOTIFY: async handler failed: %r", exc, exc_info=exc)

    async def drain(self) -> None:
        """Wait until every notification queued so far has run."""
        while True:
            await asyncio.sleep(0)
            if self._queued:
                continue
            if not self._pending:
                return
            await asyncio.gather(*list(self._pending), return_exceptions=True)
