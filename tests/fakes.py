"""Test doubles for the frame source and alert sinks."""

from typing import List, Tuple

import numpy as np

from motion_monitor.core.errors import CaptureEmpty, DeviceUnavailable
from motion_monitor.core.models import AlertPosition


def solid_frame(value: int, width: int = 640, height: int = 480) -> np.ndarray:
    """Uniform BGR frame."""
    return np.full((height, width, 3), value, dtype=np.uint8)


class FakeSource:
    """
    Scripted frame source.

    Items are frames (returned) or exception instances (raised). Once the
    script runs out every read raises CaptureEmpty.
    """

    def __init__(self, items=None, available: bool = True, device_index: int = 0):
        self.items = list(items or [])
        self.available = available
        self.device_index = device_index
        self.opened = False
        self.released = False
        self.reads = 0

    def open(self):
        if not self.available:
            raise DeviceUnavailable(self.device_index)
        self.opened = True
        return self

    def read(self) -> np.ndarray:
        self.reads += 1
        if not self.items:
            raise CaptureEmpty(self.device_index)
        item = self.items.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def release(self):
        self.released = True
        self.opened = False

    @property
    def is_available(self) -> bool:
        return self.opened

    def __enter__(self):
        return self.open()

    def __exit__(self, *args):
        self.release()


class RecordingFlash:
    """Flash sink that records calls."""

    def __init__(self, error: Exception = None):
        self.calls: List[Tuple[Tuple[int, int, int], int]] = []
        self.error = error

    def flash(self, color, duration_ms):
        self.calls.append((color, duration_ms))
        if self.error:
            raise self.error


class RecordingPreview:
    """Preview sink that records calls without reading frames."""

    def __init__(self, error: Exception = None):
        self.calls: List[Tuple[AlertPosition, int, int]] = []
        self.error = error

    def show(self, source, position, duration_ms, fps):
        self.calls.append((position, duration_ms, fps))
        if self.error:
            raise self.error


class MemoryPositionStore:
    """Position store kept in memory."""

    def __init__(self, position: AlertPosition = None, error: Exception = None):
        self.position = position or AlertPosition(50, 50)
        self.saved: List[AlertPosition] = []
        self.error = error

    def load(self) -> AlertPosition:
        return self.position

    def save(self, position: AlertPosition) -> None:
        if self.error:
            raise self.error
        self.saved.append(position)
        self.position = position
