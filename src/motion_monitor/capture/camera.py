"""Camera frame source backed by cv2.VideoCapture."""

import logging
from typing import Optional, Tuple

import cv2
import numpy as np

from ..core.config import CameraConfig
from ..core.errors import CaptureEmpty, CaptureError, DeviceUnavailable

logger = logging.getLogger(__name__)


class CameraSource:
    def __init__(
        self,
        device_index: int = 0,
        frame_width: Optional[int] = None,
        frame_height: Optional[int] = None,
        read_timeout_ms: Optional[int] = None
    ):
        self.device_index = device_index
        self.frame_width = frame_width
        self.frame_height = frame_height
        self.read_timeout_ms = read_timeout_ms
        self.cap = None

    @classmethod
    def from_config(cls, config: CameraConfig) -> "CameraSource":
        return cls(
            device_index=config.device_index,
            frame_width=config.frame_width,
            frame_height=config.frame_height,
            read_timeout_ms=config.read_timeout_ms
        )

    def open(self) -> "CameraSource":
        if self.is_available:
            return self

        self.cap = cv2.VideoCapture(self.device_index)
        if not self.cap.isOpened():
            self.cap.release()
            self.cap = None
            raise DeviceUnavailable(self.device_index)

        if self.frame_width:
            self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.frame_width)
        if self.frame_height:
            self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.frame_height)
        if self.read_timeout_ms and hasattr(cv2, "CAP_PROP_READ_TIMEOUT_MSEC"):
            self.cap.set(cv2.CAP_PROP_READ_TIMEOUT_MSEC, self.read_timeout_ms)

        logger.info(f"Camera {self.device_index} opened at {self.resolution}")
        return self

    def read(self) -> np.ndarray:
        """Read one frame. Raises CaptureEmpty or CaptureError."""
        if self.cap is None:
            raise CaptureError(self.device_index, "source is not open")

        ret, frame = self.cap.read()
        if ret and frame is not None and frame.size > 0:
            return frame

        if not self.cap.isOpened():
            raise CaptureError(self.device_index, "device lost")
        raise CaptureEmpty(self.device_index)

    @property
    def is_available(self) -> bool:
        return self.cap is not None and self.cap.isOpened()

    @property
    def resolution(self) -> Optional[Tuple[int, int]]:
        """(width, height) reported by the driver."""
        if not self.is_available:
            return None
        return (
            int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )

    def release(self):
        if self.cap is not None:
            self.cap.release()
            self.cap = None
            logger.info(f"Camera {self.device_index} released")

    def __enter__(self):
        return self.open()

    def __exit__(self, *args):
        self.release()
