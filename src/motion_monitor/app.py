#!/usr/bin/env python3
"""
Motion Monitor Application
==========================
Wires the camera, detector, alert sinks, position store and control
surface together.

Threads:
  main            monitor loop (OpenCV windows are driven from here)
  console-controls pause/resume/move commands, daemon
"""

import logging
from typing import Optional

import cv2

from .alerts.border import BorderFlash
from .alerts.coordinator import AlertCoordinator
from .alerts.log_sink import LogFlashSink, LogPreviewSink
from .alerts.preview import FeedPreview
from .controls.console import ConsoleControls
from .core.config import MonitorConfig
from .core.errors import DeviceUnavailable
from .core.events import EventBus, EventLogger
from .core.models import AlertPosition
from .monitor.loop import MonitorLoop
from .monitor.state import MonitorState
from .storage.position_store import JsonPositionStore

logger = logging.getLogger(__name__)


class MotionMonitorApp:
    """Single-camera motion monitor with visual alerts."""

    def __init__(
        self,
        config: Optional[MonitorConfig] = None,
        headless: bool = False,
        enable_controls: bool = True
    ):
        """
        Args:
            config: Monitor configuration
            headless: Log alerts instead of drawing windows
            enable_controls: Read pause/move commands from the console
        """
        self.config = config or MonitorConfig()
        self.headless = headless

        self.event_bus = EventBus()
        self.event_bus.subscribe(None, EventLogger(logging.DEBUG))

        # Position is read once here; later changes come from the controls
        self.store = JsonPositionStore(
            self.config.position_path,
            default=AlertPosition(*self.config.default_position)
        )
        self.state = MonitorState(self.store.load(), event_bus=self.event_bus)

        if headless:
            flash_sink, preview_sink = LogFlashSink(), LogPreviewSink()
        else:
            flash_sink = BorderFlash.from_config(self.config.alert)
            preview_sink = FeedPreview.from_config(self.config.alert)

        self.alerts = AlertCoordinator(
            flash_sink,
            preview_sink,
            config=self.config.alert,
            event_bus=self.event_bus
        )
        self.loop = MonitorLoop(
            self.config,
            self.state,
            self.alerts,
            event_bus=self.event_bus
        )

        self.controls = None
        if enable_controls:
            self.controls = ConsoleControls(
                self.state,
                self.store,
                status_provider=self.get_status
            )

    def get_status(self) -> dict:
        """Current monitor status for the console."""
        return {
            "status": self.loop.status.name,
            "threshold": self.config.motion.sensitivity_threshold,
            **self.loop.stats.to_dict(),
        }

    def run(self, max_cycles: int = 0) -> int:
        """
        Run until stopped.

        Returns:
            Process exit code
        """
        if self.controls:
            self.controls.start()

        try:
            self.loop.run(max_cycles=max_cycles)
        except DeviceUnavailable as e:
            print(f"Camera not detected! ({e.message})")
            return 1
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
        finally:
            self.cleanup()

        return 0

    def cleanup(self) -> None:
        """Release UI resources. The camera is released by the loop."""
        self.state.stop()
        self.event_bus.shutdown()
        if not self.headless:
            cv2.destroyAllWindows()
