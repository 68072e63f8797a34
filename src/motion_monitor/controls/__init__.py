# Control Surface - Pause/Resume and Repositioning
from .console import ConsoleControls

__all__ = ["ConsoleControls"]
