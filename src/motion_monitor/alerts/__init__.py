# Alert Layer - Border Flash, Feed Preview, Coordination
from .coordinator import AlertCoordinator
from .border import BorderFlash
from .preview import FeedPreview
from .log_sink import LogFlashSink, LogPreviewSink

__all__ = ["AlertCoordinator", "BorderFlash", "FeedPreview", "LogFlashSink", "LogPreviewSink"]
