"""Timed live-feed thumbnail rendered with OpenCV HighGUI."""

import logging
import time

import cv2

from ..core.config import AlertConfig
from ..core.errors import CaptureEmpty
from ..core.models import AlertPosition
from ..core.protocols import FrameSource

logger = logging.getLogger(__name__)


class FeedPreview:
    """Pulls frames from the monitored source and shows them at a screen position."""

    WINDOW_NAME = "Motion Preview"

    def __init__(self, width: int = 320, height: int = 240):
        self.width = width
        self.height = height

    @classmethod
    def from_config(cls, config: AlertConfig) -> "FeedPreview":
        return cls(width=config.preview_width, height=config.preview_height)

    def show(
        self,
        source: FrameSource,
        position: AlertPosition,
        duration_ms: int,
        fps: int
    ) -> None:
        """
        Render the feed for duration_ms at fps, then close the window.

        Empty reads are skipped. CaptureError propagates to the caller.
        """
        frame_interval_ms = max(1, int(1000 / fps))
        deadline = time.monotonic() + duration_ms / 1000.0
        shown = 0

        cv2.namedWindow(self.WINDOW_NAME, cv2.WINDOW_AUTOSIZE)
        cv2.moveWindow(self.WINDOW_NAME, position.x, position.y)
        cv2.setWindowProperty(self.WINDOW_NAME, cv2.WND_PROP_TOPMOST, 1)
        try:
            while time.monotonic() < deadline:
                try:
                    frame = source.read()
                except CaptureEmpty:
                    cv2.waitKey(frame_interval_ms)
                    continue

                thumbnail = cv2.resize(frame, (self.width, self.height))
                cv2.imshow(self.WINDOW_NAME, thumbnail)
                shown += 1
                cv2.waitKey(frame_interval_ms)
        finally:
            cv2.destroyWindow(self.WINDOW_NAME)
            cv2.waitKey(1)

        logger.debug(f"Preview showed {shown} frames at {position.to_tuple()}")
