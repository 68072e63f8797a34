#!/usr/bin/env python3
"""
Alert Coordinator
=================
Runs the alert window on a positive motion decision:

    flash border (blocking, ~200ms) -> feed preview (blocking, ~5s) -> return

Both sinks run on the caller's thread, one after the other, so no frame
is read for detection while the window is open. A sustained motion scene
therefore produces one alert window at a time, never a queue of them.
Sink failures are logged and counted here and never reach the loop.
"""

import logging
import time
from typing import Optional

from ..core.config import AlertConfig
from ..core.events import EventBus, EventType
from ..core.models import AlertOutcome, AlertPosition, MotionResult
from ..core.protocols import FlashSink, FrameSource, PreviewSink

logger = logging.getLogger(__name__)


class AlertCoordinator:
    """Serializes the flash and preview sinks into one bounded alert window."""

    def __init__(
        self,
        flash_sink: FlashSink,
        preview_sink: PreviewSink,
        config: Optional[AlertConfig] = None,
        event_bus: Optional[EventBus] = None
    ):
        """
        Args:
            flash_sink: Border highlight collaborator
            preview_sink: Live thumbnail collaborator
            config: Colors and durations
            event_bus: Optional bus for ALERT_* events
        """
        self.flash_sink = flash_sink
        self.preview_sink = preview_sink
        self.config = config or AlertConfig()
        self.event_bus = event_bus
        self.sink_failures = 0

    def _emit(self, event_type: EventType, **data) -> None:
        if self.event_bus:
            self.event_bus.emit_simple(event_type, source="alerts", **data)

    def _run_sink(self, name: str, call, *args) -> bool:
        """Call a sink, containing any failure."""
        try:
            call(*args)
            return True
        except Exception as e:
            self.sink_failures += 1
            logger.error(f"{name} sink failed: {e}")
            self._emit(EventType.ALERT_SINK_ERROR, sink=name, error=str(e))
            return False

    def on_motion_detected(
        self,
        source: FrameSource,
        position: AlertPosition,
        result: Optional[MotionResult] = None
    ) -> AlertOutcome:
        """
        Run the alert window. Returns only after both sinks finished.

        Args:
            source: Frame source the preview pulls from
            position: Current preview position
            result: Triggering detection, for logging

        Returns:
            AlertOutcome describing which sinks succeeded
        """
        start = time.time()
        score = result.score if result else None
        logger.info(f"Motion detected (score={score}), alerting")
        self._emit(EventType.ALERT_STARTED, score=score, position=position.to_tuple())

        flashed = self._run_sink(
            "flash",
            self.flash_sink.flash,
            self.config.border_color,
            self.config.flash_duration_ms
        )
        previewed = self._run_sink(
            "preview",
            self.preview_sink.show,
            source,
            position,
            self.config.preview_duration_ms,
            self.config.preview_fps
        )

        outcome = AlertOutcome(
            flashed=flashed,
            previewed=previewed,
            duration_ms=(time.time() - start) * 1000
        )
        self._emit(
            EventType.ALERT_FINISHED,
            flashed=flashed,
            previewed=previewed,
            duration_ms=round(outcome.duration_ms, 1)
        )
        return outcome
