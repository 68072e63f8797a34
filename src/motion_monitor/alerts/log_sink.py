"""Headless alert sinks: log instead of drawing."""

import logging
from typing import Tuple

from ..core.models import AlertPosition
from ..core.protocols import FrameSource

logger = logging.getLogger(__name__)


class LogFlashSink:
    """Logs the flash. Does not block."""

    def flash(self, color: Tuple[int, int, int], duration_ms: int) -> None:
        logger.warning(f"MOTION: border flash {color} ({duration_ms}ms)")


class LogPreviewSink:
    """Logs the preview request. Pulls no frames."""

    def show(
        self,
        source: FrameSource,
        position: AlertPosition,
        duration_ms: int,
        fps: int
    ) -> None:
        logger.info(f"Preview skipped (headless): {duration_ms}ms at {position.to_tuple()}")
