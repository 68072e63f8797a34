#!/usr/bin/env python3
"""
Protocol definitions for swappable components.

Using Python's Protocol for structural subtyping.
The loop and the alert coordinator only depend on these, so the camera,
sinks and store can be replaced by fakes in tests or by other backends.
"""

from typing import Protocol, runtime_checkable, Tuple

import numpy as np

from .models import AlertPosition, MotionResult


# =============================================================================
# CAPTURE PROTOCOL
# =============================================================================

@runtime_checkable
class FrameSource(Protocol):
    """Interface for a single camera device."""

    def open(self) -> "FrameSource":
        """
        Open the device.

        Raises:
            DeviceUnavailable: if the device cannot be opened
        """
        ...

    def read(self) -> np.ndarray:
        """
        Read the next frame, blocking until the driver delivers one.

        Returns:
            BGR image

        Raises:
            CaptureEmpty: read returned no data, skip this cycle
            CaptureError: device lost
        """
        ...

    def release(self) -> None:
        """Release the device. Safe to call more than once."""
        ...

    @property
    def is_available(self) -> bool:
        """True while the device is open."""
        ...

    def __enter__(self) -> "FrameSource":
        ...

    def __exit__(self, *args) -> None:
        ...


# =============================================================================
# DETECTION PROTOCOL
# =============================================================================

@runtime_checkable
class MotionDetector(Protocol):
    """Interface for frame-over-frame motion detection."""

    def evaluate(self, frame: np.ndarray) -> MotionResult:
        """
        Compare a preprocessed frame against the reference.

        Raises:
            ResolutionMismatch: frame shape differs from the reference
        """
        ...

    def reset(self) -> None:
        """Drop the reference frame."""
        ...


# =============================================================================
# ALERT SINK PROTOCOLS
# =============================================================================

@runtime_checkable
class FlashSink(Protocol):
    """Draws a screen border highlight."""

    def flash(self, color: Tuple[int, int, int], duration_ms: int) -> None:
        """Show the highlight, wait duration_ms, hide it. Blocks."""
        ...


@runtime_checkable
class PreviewSink(Protocol):
    """Shows a live thumbnail of the feed."""

    def show(
        self,
        source: FrameSource,
        position: AlertPosition,
        duration_ms: int,
        fps: int
    ) -> None:
        """
        Render frames pulled from source at position for duration_ms.

        Blocks until the window closes. Frames are released before returning.
        """
        ...


# =============================================================================
# STORAGE PROTOCOL
# =============================================================================

@runtime_checkable
class PositionStore(Protocol):
    """Persisted alert position."""

    def load(self) -> AlertPosition:
        """Stored position, or the fallback when nothing is stored."""
        ...

    def save(self, position: AlertPosition) -> None:
        """Overwrite the stored position."""
        ...
