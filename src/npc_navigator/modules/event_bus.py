"""Thread-safe broadcast bus for navigation events.

Two kinds of bus exist at runtime: the process-wide error bus that
every agent publishes ``NavigationError`` events on, and one
``place_reached`` bus per agent. Both are plain ``EventBus`` instances;
tests build isolated ones instead of sharing ``ERRORED``.

Usage::

    from npc_navigator.modules.event_bus import ERRORED

    def on_error(error):
        if error.agent is my_agent:
            ...

    unsubscribe = ERRORED.subscribe(on_error)
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Callable, Generic, TypeVar

from npc_navigator.utils.config import DEFAULT_EVENT_HISTORY

logger = logging.getLogger(__name__)

E = TypeVar("E")


class EventBus(Generic[E]):
    """Multi-producer, multi-consumer broadcast of typed events.

    Every subscriber registered at publish time receives each event
    exactly once. Subscribers run on the publishing thread, outside the
    lock, so they may subscribe or unsubscribe from inside a callback.

    Parameters
    ----------
    name : str
        Label used in log messages.
    max_events : int
        Published events retained for inspection (oldest are dropped).
    """

    def __init__(self, name: str = "bus", max_events: int = DEFAULT_EVENT_HISTORY) -> None:
        self._name = name
        self._lock = threading.Lock()
        self._events: deque[E] = deque(maxlen=max_events)
        self._subscribers: list[Callable[[E], None]] = []
        self._published = 0
        self._closed = False

    @property
    def name(self) -> str:
        return self._name

    # ------------------------------------------------------------------
    # Publish
    # ------------------------------------------------------------------

    def emit(self, event: E) -> int:
        """Record an event and deliver it to all current subscribers.

        Returns the number of subscribers that received it.
        """
        with self._lock:
            if self._closed:
                logger.debug("Dropped event on closed bus %s", self._name)
                return 0
            self._events.append(event)
            self._published += 1
            subscribers = list(self._subscribers)

        logger.debug("Bus %s: %s -> %d subscriber(s)", self._name, type(event).__name__, len(subscribers))

        for cb in subscribers:
            try:
                cb(event)
            except Exception as e:
                logger.warning("Subscriber error on bus %s: %s", self._name, e)
        return len(subscribers)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, callback: Callable[[E], None]) -> Callable[[], None]:
        """Register a callback invoked on every emit.

        Registering the same callback twice has no effect. Returns a
        function that removes the subscription.
        """
        with self._lock:
            if self._closed:
                raise RuntimeError(f"Bus {self._name} is closed")
            if callback not in self._subscribers:
                self._subscribers.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: Callable[[E], None]) -> None:
        """Remove a previously registered callback."""
        with self._lock:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                pass

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def get_events(self) -> list[E]:
        with self._lock:
            return list(self._events)

    def get_latest(self, n: int = 10) -> list[E]:
        with self._lock:
            items = list(self._events)
            return items[-n:]

    @property
    def event_count(self) -> int:
        """Total events published since creation."""
        with self._lock:
            return self._published

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Forget recorded events (subscribers are kept)."""
        with self._lock:
            self._events.clear()
            self._published = 0

    def close(self) -> None:
        """Drop all subscribers; later emits are ignored."""
        with self._lock:
            self._subscribers.clear()
            self._events.clear()
            self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed


# Process-wide error bus shared by agents that are not given their own.
ERRORED: EventBus = EventBus(name="errored")
