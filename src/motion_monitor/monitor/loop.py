#!/usr/bin/env python3
"""
Monitor Loop
============
Capture -> preprocess -> evaluate -> alert, one cycle at a time.

State Diagram:
    IDLE → MONITORING ⟷ PAUSED
     ↓         ↓  ↑
  STOPPED   ALERTING
               (any) → STOPPED

Transition Rules:
- IDLE → MONITORING: camera opened (PAUSED if the pause flag is already set)
- IDLE → STOPPED: DeviceUnavailable
- MONITORING ⟷ PAUSED: pause flag read at the start of each cycle
- MONITORING → ALERTING → MONITORING: positive decision, synchronously
- any → STOPPED: device lost, stop requested, or loop exit

Cadence is a fixed sleep after every cycle, whatever the cycle cost, so
the polling rate is approximate. Only one frame and one evaluation are
ever in flight.
"""

import logging
import time
from typing import Callable, List, Optional

import numpy as np

from ..alerts.coordinator import AlertCoordinator
from ..capture.camera import CameraSource
from ..core.config import CameraConfig, MonitorConfig
from ..core.errors import CaptureEmpty, CaptureError, DeviceUnavailable, ResolutionMismatch
from ..core.events import EventBus, EventType
from ..core.models import MonitorStats, MonitorStatus, MotionResult, StatusTransition
from ..core.protocols import FrameSource, MotionDetector
from ..perception.motion import FrameDifferenceDetector
from ..perception.preprocess import Preprocessor
from .state import MonitorState

logger = logging.getLogger(__name__)

SourceFactory = Callable[[CameraConfig], FrameSource]


class MonitorLoop:
    """
    Drives one camera through the detection pipeline until stopped.

    Runs on a single thread. The pause flag and alert position are read
    from MonitorState each cycle; nothing else is shared.
    """

    MAX_TRANSITIONS = 100  # Kept for status display only

    def __init__(
        self,
        config: MonitorConfig,
        state: MonitorState,
        alerts: AlertCoordinator,
        source_factory: Optional[SourceFactory] = None,
        preprocessor: Optional[Preprocessor] = None,
        detector: Optional[MotionDetector] = None,
        event_bus: Optional[EventBus] = None,
        sleep: Optional[Callable[[float], None]] = None
    ):
        """
        Initialize the loop.

        Args:
            config: Monitor configuration
            state: Shared pause/running/position handle
            alerts: Alert window runner
            source_factory: Builds the frame source (defaults to CameraSource)
            preprocessor: Grayscale + blur stage (built from config if omitted)
            detector: Motion detector (built from config if omitted)
            event_bus: Optional bus for lifecycle and detection events
            sleep: Inter-cycle sleep function (time.sleep by default)
        """
        self.config = config
        self.state = state
        self.alerts = alerts
        self._source_factory = source_factory or CameraSource.from_config
        self.preprocessor = preprocessor or Preprocessor.from_config(config.preprocess)
        self.detector = detector or FrameDifferenceDetector.from_config(config.motion)
        self.event_bus = event_bus
        self._sleep = sleep or time.sleep

        self.stats = MonitorStats()
        self._status = MonitorStatus.IDLE
        self._transitions: List[StatusTransition] = []
        self._consecutive_empty = 0

    # -------------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------------

    @property
    def status(self) -> MonitorStatus:
        return self._status

    @property
    def transitions(self) -> List[StatusTransition]:
        return list(self._transitions)

    def _emit(self, event_type: EventType, **data) -> None:
        if self.event_bus:
            self.event_bus.emit_simple(event_type, source="monitor", **data)

    def _set_status(self, new_status: MonitorStatus, reason: str = "") -> None:
        """Record and emit a status transition."""
        old_status = self._status
        if old_status == new_status:
            return

        self._status = new_status
        self._transitions.append(StatusTransition(
            from_status=old_status,
            to_status=new_status,
            timestamp=time.time(),
            reason=reason
        ))
        if len(self._transitions) > self.MAX_TRANSITIONS:
            self._transitions = self._transitions[-self.MAX_TRANSITIONS:]

        logger.debug(f"Monitor: {old_status.name} → {new_status.name} ({reason})")
        self._emit(
            EventType.STATUS_CHANGED,
            from_status=old_status.name,
            to_status=new_status.name,
            reason=reason
        )

    # -------------------------------------------------------------------------
    # Main loop
    # -------------------------------------------------------------------------

    def run(self, max_cycles: int = 0) -> MonitorStatus:
        """
        Open the camera and cycle until stopped.

        Args:
            max_cycles: Stop after this many cycles (0 = unlimited)

        Returns:
            Final status (always STOPPED)

        Raises:
            DeviceUnavailable: camera could not be opened
        """
        device_index = self.config.camera.device_index
        source = self._source_factory(self.config.camera)

        try:
            with source:
                initial = MonitorStatus.PAUSED if self.state.paused else MonitorStatus.MONITORING
                self._set_status(initial, f"camera {device_index} opened")
                self._emit(EventType.MONITOR_STARTED, device_index=device_index)
                logger.info("Monitoring for motion...")
                self._run_cycles(source, max_cycles)
        except DeviceUnavailable as e:
            logger.error(e.message)
            self._emit(EventType.CAMERA_ERROR, **e.to_dict())
            self._set_status(MonitorStatus.STOPPED, "device unavailable")
            raise
        except CaptureError as e:
            logger.error(e.message)
            self._emit(EventType.CAMERA_ERROR, **e.to_dict())
            self._set_status(MonitorStatus.STOPPED, "capture failed")
        finally:
            self._set_status(MonitorStatus.STOPPED, "loop exited")
            self._emit(EventType.MONITOR_STOPPED, **self.stats.to_dict())
            logger.info(f"Monitor stopped: {self.stats.to_dict()}")

        return self._status

    def _run_cycles(self, source: FrameSource, max_cycles: int) -> None:
        delay = self.config.cycle_delay_ms / 1000.0
        cycles = 0

        while self.state.running:
            self.run_cycle(source)
            cycles += 1

            if max_cycles > 0 and cycles >= max_cycles:
                logger.info(f"Reached {max_cycles} cycles")
                break

            self._sleep(delay)

    def run_cycle(self, source: FrameSource) -> Optional[MotionResult]:
        """
        One capture cycle.

        Returns:
            MotionResult if the frame was evaluated, None if the cycle was
            skipped (empty read, paused, resolution mismatch)

        Raises:
            CaptureError: device lost
        """
        self.stats.cycles += 1
        self._sync_pause()
        start = time.time()

        try:
            frame = source.read()
        except CaptureEmpty as e:
            self._on_empty_read(e)
            return None
        self._consecutive_empty = 0
        self.stats.frames_read += 1

        # Paused: keep the camera draining, drop the frame
        if self._status == MonitorStatus.PAUSED or self.state.paused:
            return None

        result = self._evaluate(self.preprocessor.process(frame))
        if result is None:
            return None

        self.stats.evaluations += 1
        self.stats.update_timing((time.time() - start) * 1000)

        if result.detected:
            self._alert(source, result)

        return result

    # -------------------------------------------------------------------------
    # Cycle steps
    # -------------------------------------------------------------------------

    def _sync_pause(self) -> None:
        """Apply the latest pause flag."""
        paused = self.state.paused

        if paused and self._status == MonitorStatus.MONITORING:
            self._set_status(MonitorStatus.PAUSED, "paused by user")

        elif not paused and self._status == MonitorStatus.PAUSED:
            # Reference is stale after a gap
            if self.config.motion.reset_reference_on_resume:
                self.detector.reset()
            self._set_status(MonitorStatus.MONITORING, "resumed by user")

    def _on_empty_read(self, error: CaptureEmpty) -> None:
        self.stats.empty_reads += 1
        self._consecutive_empty += 1
        logger.debug(f"Skipping cycle: {error.message}")

        limit = self.config.max_consecutive_empty
        if limit > 0 and self._consecutive_empty >= limit:
            raise CaptureError(
                self.config.camera.device_index,
                f"{self._consecutive_empty} consecutive empty reads"
            )

    def _evaluate(self, gray: np.ndarray) -> Optional[MotionResult]:
        """Run the detector; a resolution mismatch skips the cycle."""
        try:
            return self.detector.evaluate(gray)
        except ResolutionMismatch as e:
            self.stats.resolution_mismatches += 1
            logger.warning(f"{e.message}; reference reset")
            self._emit(EventType.RESOLUTION_MISMATCH, **e.details)
            return None

    def _alert(self, source: FrameSource, result: MotionResult) -> None:
        """Run the alert window synchronously. No detection happens meanwhile."""
        self.stats.alerts += 1
        self._emit(EventType.MOTION_DETECTED, score=result.score)
        self._set_status(MonitorStatus.ALERTING, f"score {result.score}")

        try:
            outcome = self.alerts.on_motion_detected(source, self.state.position, result)
        finally:
            after = MonitorStatus.PAUSED if self.state.paused else MonitorStatus.MONITORING
            self._set_status(after, "alert window closed")

        self.stats.sink_failures += (not outcome.flashed) + (not outcome.previewed)
