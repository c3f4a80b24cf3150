"""
Event Bus - Central event routing system

Implements pub-sub pattern:
- Publishers: publish(event)
- Subscribers: subscribe(event_type, handler, priority, filter_fn)
- Middleware: add_middleware(middleware_fn)

Scene replacement, preview start/stop, export progress and user
notifications all travel through one bus owned by the host.
"""

import asyncio
from typing import Callable, List, Dict, Optional
from dataclasses import dataclass
from models.events import Event, EventType
from models.enums import LogCategory
from utils.logger import get_category_logger

log = get_category_logger(LogCategory.EVENT)


@dataclass
class EventHandler:
    """Event handler registration"""
    handler: Callable[[Event], None]
    priority: int
    filter_fn: Optional[Callable[[Event], bool]]


class EventBus:
    """
    Central event bus for pub-sub event handling

    Features:
    - Priority-based handler execution (high priority first)
    - Per-handler filtering
    - Middleware pipeline (logging, blocking)
    - Async/sync handler support (auto-detected)
    - Fault tolerance (one handler crash doesn't stop others)

    Example:
        bus = EventBus()

        bus.subscribe(
            EventType.EXPORT_PROGRESS,
            on_progress,
            priority=10,
            filter_fn=lambda e: e.phase == ExportPhase.ENCODING
        )

        await bus.publish(ExportProgressEvent(75, ExportPhase.ENCODING))
    """

    def __init__(self, history_limit: int = 100):
        # Handlers organized by event type
        self._handlers: Dict[EventType, List[EventHandler]] = {}

        # Middleware pipeline (applied in registration order)
        self._middleware: List[Callable[[Event], Optional[Event]]] = []

        # Event history (bounded, newest last)
        self._event_history: List[Event] = []
        self._history_limit = history_limit

    def subscribe(
        self,
        event_type: EventType,
        handler: Callable[[Event], None],
        priority: int = 0,
        filter_fn: Optional[Callable[[Event], bool]] = None
    ) -> None:
        """
        Subscribe to event type

        Args:
            event_type: Which events to listen for
            handler: Function to call (can be async or sync)
            priority: Execution priority (higher = called first, default: 0)
            filter_fn: Optional filter (return True = handle, False = skip)
        """
        if event_type not in self._handlers:
            self._handlers[event_type] = []

        self._handlers[event_type].append(EventHandler(handler, priority, filter_fn))

        # Stable sort keeps registration order among equal priorities
        self._handlers[event_type].sort(key=lambda h: h.priority, reverse=True)

        log.debug(
            "Event handler subscribed",
            event_type=event_type.name,
            handler=getattr(handler, "__name__", repr(handler)),
            priority=priority
        )

    def unsubscribe(self, event_type: EventType, handler: Callable[[Event], None]) -> bool:
        """Remove a handler; returns False if it was never subscribed"""
        entries = self._handlers.get(event_type, [])
        for entry in entries:
            if entry.handler == handler:
                entries.remove(entry)
                return True
        return False

    def add_middleware(self, middleware: Callable[[Event], Optional[Event]]) -> None:
        """
        Add middleware to event processing pipeline

        Middleware can modify events (return modified event), block events
        (return None) or just observe them. Runs in registration order.
        """
        self._middleware.append(middleware)
        log.debug("Middleware registered", middleware=middleware.__name__)

    async def publish(self, event: Event) -> None:
        """
        Publish event to all subscribers

        Flow:
        1. Apply middleware (can modify or block event)
        2. Save to event history
        3. Execute handlers by priority (high → low), applying filters
        4. Catch and log handler exceptions (fault tolerance)
        """
        for middleware in self._middleware:
            processed_event = middleware(event)
            if processed_event is None:
                return
            event = processed_event

        self._event_history.append(event)
        if len(self._event_history) > self._history_limit:
            self._event_history.pop(0)

        handlers = self._handlers.get(event.type, [])
        if not handlers:
            log.debug("No handlers for event", event_type=event.type.name)
            return

        # Copy: handlers may unsubscribe while being called
        for handler_entry in list(handlers):
            if handler_entry.filter_fn and not handler_entry.filter_fn(event):
                continue

            try:
                if asyncio.iscoroutinefunction(handler_entry.handler):
                    await handler_entry.handler(event)
                else:
                    handler_entry.handler(event)
            except Exception as e:
                log.error(
                    f"Event handler failed: {getattr(handler_entry.handler, '__name__', '?')} "
                    f"for {event.type.name}",
                    exception=e
                )

    def get_event_history(self, limit: int = 10) -> List[Event]:
        """Recent events (newest last)"""
        return self._event_history[-limit:]

    def clear_history(self) -> None:
        self._event_history.clear()
