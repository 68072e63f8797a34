#!/usr/bin/env python3
"""
Shared monitor state.

One handle is created at startup and passed to both the loop and the
control surface. The control surface is the only writer; the loop reads
the latest values once per cycle. Being one cycle stale is acceptable.
"""

import logging
import threading
from typing import Optional

from ..core.events import EventBus, EventType
from ..core.models import AlertPosition

logger = logging.getLogger(__name__)


class MonitorState:
    """
    Process-lifetime flags plus the current alert position.

    Reads are plain attribute reads. Writes go through the lock so that a
    toggle (read-modify-write) cannot interleave with another writer.
    """

    def __init__(
        self,
        position: AlertPosition,
        paused: bool = False,
        event_bus: Optional[EventBus] = None
    ):
        self._lock = threading.Lock()
        self._paused = paused
        self._running = True
        self._position = position
        self.event_bus = event_bus

    def _emit(self, event_type: EventType, **data) -> None:
        if self.event_bus:
            self.event_bus.emit_simple(event_type, source="state", **data)

    # -------------------------------------------------------------------------
    # Pause flag
    # -------------------------------------------------------------------------

    @property
    def paused(self) -> bool:
        return self._paused

    def pause(self) -> bool:
        """Pause monitoring. Returns True if the flag changed."""
        with self._lock:
            changed = not self._paused
            self._paused = True
        if changed:
            logger.info("Monitoring paused")
            self._emit(EventType.PAUSED)
        return changed

    def resume(self) -> bool:
        """Resume monitoring. Returns True if the flag changed."""
        with self._lock:
            changed = self._paused
            self._paused = False
        if changed:
            logger.info("Monitoring resumed")
            self._emit(EventType.RESUMED)
        return changed

    def toggle_pause(self) -> bool:
        """Flip the pause flag. Returns the new value."""
        with self._lock:
            self._paused = not self._paused
            paused = self._paused
        logger.info("Monitoring paused" if paused else "Monitoring resumed")
        self._emit(EventType.PAUSED if paused else EventType.RESUMED)
        return paused

    # -------------------------------------------------------------------------
    # Running flag
    # -------------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._running

    def stop(self) -> None:
        """Ask the loop to exit after the current cycle."""
        with self._lock:
            self._running = False
        logger.info("Stop requested")

    # -------------------------------------------------------------------------
    # Alert position
    # -------------------------------------------------------------------------

    @property
    def position(self) -> AlertPosition:
        return self._position

    def set_position(self, position: AlertPosition) -> None:
        """Replace the position wholesale."""
        with self._lock:
            self._position = position
        logger.info(f"Alert position set to {position.to_tuple()}")
        self._emit(EventType.POSITION_CHANGED, x=position.x, y=position.y)
