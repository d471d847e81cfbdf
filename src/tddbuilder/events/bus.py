"""Synchronous event bus for interview lifecycle events."""

from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class EventBus:
    """Publish-subscribe bus; listeners run in registration order.

    Listeners subscribe to one event type or, via :meth:`on_all`, to every
    event. A listener that raises does not stop later listeners; the failure
    is logged.
    """

    def __init__(self) -> None:
        self._listeners: dict[type, list[Listener]] = {}
        self._global_listeners: list[Listener] = []

    def subscribe(self, event_type: type, callback: Listener) -> None:
        self._listeners.setdefault(event_type, []).append(callback)

    def on_all(self, callback: Listener) -> None:
        self._global_listeners.append(callback)

    def emit(self, event: Any) -> None:
        for cb in [*self._global_listeners, *self._listeners.get(type(event), [])]:
            try:
                cb(event)
            except Exception:
                logger.exception("Listener %r failed on %s", cb, type(event).__name__)
