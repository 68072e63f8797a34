#!/usr/bin/env python3
"""
Event definitions and event bus for the monitor.

Events are how the loop, the alert coordinator and the control surface
report state changes without knowing about each other. The bus is passed
around explicitly; there is no module-level instance.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, List, Dict, Any, Optional

logger = logging.getLogger(__name__)


# =============================================================================
# EVENT TYPES
# =============================================================================

class EventType(Enum):
    """All event types emitted by the monitor."""

    # Lifecycle
    MONITOR_STARTED = auto()      # Camera opened, loop running
    MONITOR_STOPPED = auto()      # Loop ended
    STATUS_CHANGED = auto()       # MonitorStatus transition

    # Detection
    MOTION_DETECTED = auto()      # Score above sensitivity threshold
    RESOLUTION_MISMATCH = auto()  # Reference reset after shape change

    # Alert window
    ALERT_STARTED = auto()
    ALERT_FINISHED = auto()
    ALERT_SINK_ERROR = auto()     # Flash or preview sink raised

    # Control surface
    PAUSED = auto()
    RESUMED = auto()
    POSITION_CHANGED = auto()

    # Errors
    CAMERA_ERROR = auto()


# =============================================================================
# EVENT WRAPPER
# =============================================================================

@dataclass
class Event:
    """Event with metadata."""
    type: EventType
    timestamp: float
    data: Dict[str, Any] = field(default_factory=dict)
    source: str = ""  # Component that generated the event


# =============================================================================
# EVENT BUS
# =============================================================================

# Type alias for event handlers
EventHandler = Callable[[Event], None]


class EventBus:
    """
    Event bus shared by the monitor components.

    Features:
    - Subscribe to specific event types or all events
    - Optional async handling with a thread pool
    - Handler errors are logged, never raised into the emitter
    - Thread-safe
    """

    def __init__(self, max_workers: int = 2, async_handlers: bool = False):
        """
        Initialize event bus.

        Args:
            max_workers: Max threads for async handlers
            async_handlers: Whether to run handlers on a thread pool
        """
        self._handlers: Dict[EventType, List[EventHandler]] = {}
        self._global_handlers: List[EventHandler] = []
        self._lock = threading.RLock()
        self._async = async_handlers

        if async_handlers:
            self._executor = ThreadPoolExecutor(max_workers=max_workers)
        else:
            self._executor = None

        self._running = True

    def subscribe(self, event_type: Optional[EventType], handler: EventHandler) -> None:
        """
        Subscribe to events.

        Args:
            event_type: Event type to subscribe to, or None for all events
            handler: Callback function(event) -> None
        """
        with self._lock:
            if event_type is None:
                self._global_handlers.append(handler)
            else:
                self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: Optional[EventType], handler: EventHandler) -> bool:
        """
        Unsubscribe from events.

        Returns:
            True if handler was found and removed
        """
        with self._lock:
            handlers = self._global_handlers if event_type is None else self._handlers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)
                return True
            return False

    def emit(self, event: Event) -> None:
        """Emit an event to all subscribers."""
        if not self._running:
            return

        with self._lock:
            handlers = list(self._global_handlers)
            handlers.extend(self._handlers.get(event.type, []))

        for handler in handlers:
            if self._executor:
                self._executor.submit(self._call_handler, handler, event)
            else:
                self._call_handler(handler, event)

    def emit_simple(self, event_type: EventType, source: str = "", **data) -> Event:
        """
        Emit an event with simple data.

        Returns:
            The created event
        """
        event = Event(
            type=event_type,
            timestamp=time.time(),
            data=data,
            source=source
        )
        self.emit(event)
        return event

    def _call_handler(self, handler: EventHandler, event: Event) -> None:
        """Call handler with error handling."""
        try:
            handler(event)
        except Exception as e:
            logger.error(f"Event handler error for {event.type.name}: {e}")

    def shutdown(self) -> None:
        """Stop delivering events and wait for pending handlers."""
        self._running = False
        if self._executor:
            self._executor.shutdown(wait=True)


# =============================================================================
# EVENT LOGGING HANDLER
# =============================================================================

class EventLogger:
    """Handler that logs all events."""

    def __init__(self, log_level: int = logging.INFO):
        self.log_level = log_level
        self._logger = logging.getLogger("events")

    def __call__(self, event: Event) -> None:
        self._logger.log(
            self.log_level,
            f"[{event.type.name}] {event.source}: {event.data}"
        )
