#!/usr/bin/env python3
"""
Frame Preprocessing
===================
Color frame -> blurred grayscale.
The blur swallows sensor noise so lighting flicker does not read as motion.
"""

import cv2
import numpy as np

from ..core.config import PreprocessConfig
from ..core.errors import InvalidFrame


def preprocess(frame: np.ndarray, blur_kernel: int = 21) -> np.ndarray:
    """
    Convert a frame to a noise-resistant grayscale image.

    Args:
        frame: BGR image from camera (single-channel frames are accepted as-is)
        blur_kernel: Gaussian kernel size, odd

    Returns:
        New single-channel uint8 array; the input is not modified
    """
    if frame is None:
        raise InvalidFrame("frame is None")
    if frame.size == 0:
        raise InvalidFrame("frame is empty")

    if frame.ndim == 2:
        gray = frame
    elif frame.ndim == 3 and frame.shape[2] == 1:
        gray = frame[:, :, 0]
    elif frame.ndim == 3 and frame.shape[2] == 3:
        gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
    else:
        raise InvalidFrame(f"unsupported shape {frame.shape}")

    # GaussianBlur always allocates, so the caller's frame is never aliased
    return cv2.GaussianBlur(gray, (blur_kernel, blur_kernel), 0)


class Preprocessor:
    """Grayscale + Gaussian blur, fixed order. Stateless."""

    def __init__(self, blur_kernel: int = 21):
        # Reuse config validation (odd, positive)
        self.blur_kernel = PreprocessConfig(blur_kernel=blur_kernel).blur_kernel

    @classmethod
    def from_config(cls, config: PreprocessConfig) -> "Preprocessor":
        return cls(blur_kernel=config.blur_kernel)

    def process(self, frame: np.ndarray) -> np.ndarray:
        return preprocess(frame, self.blur_kernel)
