"""In-process event emitter for SystemEvents.

One `EventEmitter` is built with the backend and handed to every component
that reports lifecycle events. `emit` awaits each subscriber in turn inside
the calling request; a failing subscriber is logged and skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Coroutine
from typing import Any

from healthcare.schemas.events import SystemEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[SystemEvent], Coroutine[Any, Any, None]]


class EventEmitter:
    """Subscriber registry owned by the backend."""

    def __init__(self, handlers: list[EventHandler] | None = None) -> None:
        self._handlers: list[EventHandler] = list(handlers or [])

    def subscribe(self, handler: EventHandler) -> None:
        if handler in self._handlers:
            return
        self._handlers.append(handler)
        logger.info("Registered event subscriber: %s", getattr(handler, "__name__", handler))

    async def emit(self, event: SystemEvent) -> None:
        for handler in self._handlers:
            try:
                await handler(event)
            except Exception:
                logger.exception(
                    "Event handler %s failed for %s",
                    getattr(handler, "__name__", handler),
                    event.event_type.value,
                )
