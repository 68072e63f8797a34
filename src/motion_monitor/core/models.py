#!/usr/bin/env python3
"""
Core data models for the monitor.

Results and values are frozen dataclasses. MonitorStats is mutable and
owned by the loop thread.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Tuple


# =============================================================================
# POSITION
# =============================================================================

@dataclass(frozen=True)
class AlertPosition:
    """Screen coordinate where the feed preview appears."""
    x: int
    y: int

    def to_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict) -> AlertPosition:
        """Create from a {"x": ..., "y": ...} record."""
        return cls(x=int(data["x"]), y=int(data["y"]))


# =============================================================================
# DETECTION RESULTS
# =============================================================================

@dataclass(frozen=True)
class MotionResult:
    """Result from one evaluation of the motion detector."""
    detected: bool
    score: int  # Sum of binarized pixel differences

    # True when this call only seeded the reference frame
    initialized_reference: bool = False

    # Timing
    timestamp: float = 0.0
    process_time_ms: float = 0.0


@dataclass(frozen=True)
class AlertOutcome:
    """What happened during one alert window."""
    flashed: bool
    previewed: bool
    duration_ms: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.flashed and self.previewed


# =============================================================================
# MONITOR STATE MACHINE
# =============================================================================

class MonitorStatus(Enum):
    """State of the monitor loop."""
    IDLE = auto()        # Camera not opened yet
    MONITORING = auto()  # Capture -> preprocess -> evaluate
    PAUSED = auto()      # Capture only
    ALERTING = auto()    # Inside the alert window
    STOPPED = auto()     # Terminal


@dataclass(frozen=True)
class StatusTransition:
    """Record of a monitor status change."""
    from_status: MonitorStatus
    to_status: MonitorStatus
    timestamp: float
    reason: str = ""


@dataclass
class MonitorStats:
    """Runtime counters for the monitor loop."""
    cycles: int = 0
    frames_read: int = 0
    empty_reads: int = 0
    evaluations: int = 0
    alerts: int = 0
    resolution_mismatches: int = 0
    sink_failures: int = 0

    # Exponential moving average of capture-to-decision time
    avg_process_ms: float = 0.0

    def update_timing(self, process_ms: float) -> None:
        """Update timing average using exponential moving average."""
        alpha = 0.1
        self.avg_process_ms = alpha * process_ms + (1 - alpha) * self.avg_process_ms

    def to_dict(self) -> dict:
        return {
            "cycles": self.cycles,
            "frames_read": self.frames_read,
            "empty_reads": self.empty_reads,
            "evaluations": self.evaluations,
            "alerts": self.alerts,
            "resolution_mismatches": self.resolution_mismatches,
            "sink_failures": self.sink_failures,
            "avg_process_ms": round(self.avg_process_ms, 2),
        }
