"""Border flash rendered with OpenCV HighGUI windows."""

import logging
from typing import List, Tuple

import cv2
import numpy as np

from ..core.config import AlertConfig

logger = logging.getLogger(__name__)


class BorderFlash:
    """
    Four borderless top-most windows along the screen edges.

    cv2 has no screen query, so the screen size comes from config.
    """

    WINDOW_PREFIX = "motion_border"

    def __init__(self, screen_width: int = 1920, screen_height: int = 1080, border_width: int = 40):
        self.screen_width = screen_width
        self.screen_height = screen_height
        self.border_width = border_width

    @classmethod
    def from_config(cls, config: AlertConfig) -> "BorderFlash":
        return cls(
            screen_width=config.screen_width,
            screen_height=config.screen_height,
            border_width=config.border_width
        )

    def _regions(self) -> List[Tuple[str, int, int, int, int]]:
        """(name, x, y, width, height) for top, bottom, left, right."""
        w, h, b = self.screen_width, self.screen_height, self.border_width
        return [
            (f"{self.WINDOW_PREFIX}_top", 0, 0, w, b),
            (f"{self.WINDOW_PREFIX}_bottom", 0, h - b, w, b),
            (f"{self.WINDOW_PREFIX}_left", 0, 0, b, h),
            (f"{self.WINDOW_PREFIX}_right", w - b, 0, b, h),
        ]

    def flash(self, color: Tuple[int, int, int], duration_ms: int) -> None:
        """Show the border for duration_ms, then remove it. Blocks."""
        opened = []
        try:
            for name, x, y, width, height in self._regions():
                cv2.namedWindow(name, cv2.WINDOW_AUTOSIZE | cv2.WINDOW_GUI_NORMAL)
                opened.append(name)
                strip = np.full((height, width, 3), color, dtype=np.uint8)
                cv2.imshow(name, strip)
                cv2.moveWindow(name, x, y)
                cv2.setWindowProperty(name, cv2.WND_PROP_TOPMOST, 1)

            # waitKey pumps the GUI events and holds the border on screen
            cv2.waitKey(max(1, duration_ms))
        finally:
            for name in opened:
                cv2.destroyWindow(name)
            cv2.waitKey(1)

        logger.debug(f"Flashed border {color} for {duration_ms}ms")
