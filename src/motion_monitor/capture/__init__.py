# Capture Layer - Camera Frame Sources
from .camera import CameraSource

__all__ = ["CameraSource"]
