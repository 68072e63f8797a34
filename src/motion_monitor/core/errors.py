#!/usr/bin/env python3
"""
Exception taxonomy for the motion monitor.

DeviceUnavailable is fatal at startup, CaptureEmpty is per-cycle and
transient, CaptureError means the device went away mid-run, and
ResolutionMismatch is an invariant violation the loop recovers from.
"""

from typing import Optional, Tuple


class MotionMonitorError(Exception):
    """Base exception for all motion monitor errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN_ERROR",
        details: Optional[dict] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert exception to dictionary for logging."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


# =============================================================================
# CAPTURE ERRORS
# =============================================================================

class DeviceUnavailable(MotionMonitorError):
    """Camera device could not be opened."""

    def __init__(self, device_index: int, reason: str = "device not accessible"):
        super().__init__(
            message=f"Camera {device_index} unavailable: {reason}",
            error_code="DEVICE_UNAVAILABLE",
            details={"device_index": device_index, "reason": reason}
        )


class CaptureEmpty(MotionMonitorError):
    """A read returned no frame data. Skip the cycle."""

    def __init__(self, device_index: int):
        super().__init__(
            message=f"Camera {device_index} returned an empty frame",
            error_code="CAPTURE_EMPTY",
            details={"device_index": device_index}
        )


class CaptureError(MotionMonitorError):
    """Unrecoverable capture failure (device lost or never opened)."""

    def __init__(self, device_index: int, reason: str):
        super().__init__(
            message=f"Capture failed on camera {device_index}: {reason}",
            error_code="CAPTURE_FAILED",
            details={"device_index": device_index, "reason": reason}
        )


# =============================================================================
# FRAME ERRORS
# =============================================================================

class InvalidFrame(MotionMonitorError):
    """Frame is not a usable image array."""

    def __init__(self, reason: str):
        super().__init__(
            message=f"Invalid frame: {reason}",
            error_code="INVALID_FRAME",
            details={"reason": reason}
        )


class ResolutionMismatch(MotionMonitorError):
    """New frame does not match the reference frame's shape."""

    def __init__(self, reference_shape: Tuple[int, ...], frame_shape: Tuple[int, ...]):
        self.reference_shape = tuple(reference_shape)
        self.frame_shape = tuple(frame_shape)
        super().__init__(
            message=(
                f"Frame shape {self.frame_shape} does not match "
                f"reference shape {self.reference_shape}"
            ),
            error_code="RESOLUTION_MISMATCH",
            details={
                "reference_shape": list(self.reference_shape),
                "frame_shape": list(self.frame_shape),
            }
        )
