#!/usr/bin/env python3
"""
Core module for the motion monitor.

Contains data models, protocols, configuration, errors and events.
"""

from .models import (
    AlertPosition,
    MotionResult,
    AlertOutcome,
    MonitorStatus,
    StatusTransition,
    MonitorStats,
)

from .protocols import (
    FrameSource,
    MotionDetector,
    FlashSink,
    PreviewSink,
    PositionStore,
)

from .config import (
    CameraConfig,
    PreprocessConfig,
    MotionConfig,
    AlertConfig,
    MonitorConfig,
    PRESETS,
)

from .errors import (
    MotionMonitorError,
    DeviceUnavailable,
    CaptureEmpty,
    CaptureError,
    InvalidFrame,
    ResolutionMismatch,
)

from .events import (
    EventType,
    Event,
    EventBus,
    EventLogger,
)

__all__ = [
    # Models
    "AlertPosition",
    "MotionResult",
    "AlertOutcome",
    "MonitorStatus",
    "StatusTransition",
    "MonitorStats",
    # Protocols
    "FrameSource",
    "MotionDetector",
    "FlashSink",
    "PreviewSink",
    "PositionStore",
    # Config
    "CameraConfig",
    "PreprocessConfig",
    "MotionConfig",
    "AlertConfig",
    "MonitorConfig",
    "PRESETS",
    # Errors
    "MotionMonitorError",
    "DeviceUnavailable",
    "CaptureEmpty",
    "CaptureError",
    "InvalidFrame",
    "ResolutionMismatch",
    # Events
    "EventType",
    "Event",
    "EventBus",
    "EventLogger",
]
