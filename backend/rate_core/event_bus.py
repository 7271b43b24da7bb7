"""
rate_core/event_bus.py

In-process publish/subscribe bus relaying named feed events
("inventory:updated", "booking:created") to callbacks.

Each consumer receives its bus by reference; there is no process-wide
instance.
"""
from collections import Counter, deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Deque, Dict, List, Optional
import logging
import threading
import uuid

logger = logging.getLogger(__name__)


@dataclass
class Event:
    """
    A named feed event.

    Attributes:
        event_type: Event name, e.g. "inventory:updated"
        data: Decoded payload, camelCase keys as received
        timestamp: When the event entered the bus
        source: Who relayed it ("api", "websocket", ...)
        event_id: Unique event ID
    """

    event_type: str
    data: Dict[str, Any]
    timestamp: datetime = field(default_factory=datetime.now)
    source: str = ""
    event_id: str = field(default_factory=lambda: uuid.uuid4().hex)


Handler = Callable[[Event], None]


@dataclass
class HandlerFailure:
    handler_name: str
    error: Exception


@dataclass
class PublishResult:
    """
    Outcome of one publish.

    Attributes:
        event_type: Event name
        subscriber_count: Handlers subscribed when the event was published
        success_count: Handlers that returned normally
        failure_count: Handlers that raised
        errors: One HandlerFailure per raising handler
    """

    event_type: str
    subscriber_count: int
    success_count: int = 0
    failure_count: int = 0
    errors: List[HandlerFailure] = field(default_factory=list)


@dataclass
class EventBusStatistics:
    total_published: int = 0
    total_processed: int = 0
    total_failed: int = 0
    published_by_type: Dict[str, int] = field(default_factory=dict)
    subscriber_count: Dict[str, int] = field(default_factory=dict)


class EventBus:
    """
    Thread-safe synchronous event bus.

    Handlers run in subscription order on the publishing thread. A handler
    that raises is logged and reported in the PublishResult; the others
    still run.

    Example:
        >>> bus = EventBus()
        >>> bus.subscribe("inventory:updated", ledger.on_inventory_updated)
        >>> bus.publish(Event(event_type="inventory:updated", data={...}))
    """

    def __init__(self, history_size: int = 100):
        self._handlers: Dict[str, List[Handler]] = {}
        self._history: Deque[Event] = deque(maxlen=history_size)
        self._published: Counter = Counter()
        self._processed = 0
        self._failed = 0
        self._lock = threading.RLock()

    def subscribe(self, event_type: str, handler: Handler) -> None:
        """Subscribe a handler to an event name; subscribing twice is a no-op."""
        with self._lock:
            handlers = self._handlers.setdefault(event_type, [])
            if handler in handlers:
                return
            handlers.append(handler)
        logger.info(f"{_handler_name(handler)} subscribed to {event_type}")

    def unsubscribe(self, event_type: str, handler: Handler) -> None:
        with self._lock:
            handlers = self._handlers.get(event_type, [])
            if handler not in handlers:
                return
            handlers.remove(handler)
        logger.info(f"{_handler_name(handler)} unsubscribed from {event_type}")

    def publish(self, event: Event) -> PublishResult:
        """
        Deliver an event to every handler of its name.

        Returns:
            PublishResult with per-handler outcome counts.
        """
        with self._lock:
            self._history.append(event)
            self._published[event.event_type] += 1
            handlers = list(self._handlers.get(event.event_type, ()))

        result = PublishResult(event_type=event.event_type, subscriber_count=len(handlers))
        if not handlers:
            logger.debug(f"No subscribers for {event.event_type} ({event.event_id})")

        for handler in handlers:
            name = _handler_name(handler)
            try:
                handler(event)
            except Exception as e:
                result.failure_count += 1
                result.errors.append(HandlerFailure(handler_name=name, error=e))
                logger.error(f"{name} failed on {event.event_type} ({event.event_id}): {e}", exc_info=True)
            else:
                result.success_count += 1

        with self._lock:
            self._processed += result.success_count
            self._failed += result.failure_count
        return result

    def get_history(self, event_type: Optional[str] = None, limit: int = 50) -> List[Event]:
        """Recent events, newest first."""
        with self._lock:
            events = reversed(self._history)
            matching = [e for e in events if event_type is None or e.event_type == event_type]
        return matching[:limit]

    def get_statistics(self) -> EventBusStatistics:
        with self._lock:
            return EventBusStatistics(
                total_published=sum(self._published.values()),
                total_processed=self._processed,
                total_failed=self._failed,
                published_by_type=dict(self._published),
                subscriber_count={name: len(hs) for name, hs in self._handlers.items()},
            )

    def clear(self) -> None:
        """Drop subscribers, history and counters."""
        with self._lock:
            self._handlers.clear()
            self._history.clear()
            self._published.clear()
            self._processed = 0
            self._failed = 0


def _handler_name(handler: Callable) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


__all__ = [
    "Event",
    "Handler",
    "HandlerFailure",
    "PublishResult",
    "EventBusStatistics",
    "EventBus",
]
