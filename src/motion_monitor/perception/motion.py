#!/usr/bin/env python3
"""
Motion Detection - Frame Differencing
=====================================
Compares each preprocessed frame against the one before it.
No background model: the reference is always the last frame seen, so
sustained motion keeps scoring while a single change is measured once.
"""

import time
from typing import Optional

import cv2
import numpy as np

from ..core.config import MotionConfig
from ..core.errors import ResolutionMismatch
from ..core.models import MotionResult


class FrameDifferenceDetector:
    """
    Frame-over-frame motion detector.

    Pipeline per call:
        absdiff(reference, frame) -> binarize at binarize_delta -> sum -> compare
    """

    def __init__(
        self,
        binarize_delta: int = 25,
        sensitivity_threshold: int = 300000
    ):
        """
        Args:
            binarize_delta: Pixel difference above which a pixel counts as changed (1-255)
            sensitivity_threshold: Score above which motion is declared
        """
        config = MotionConfig(
            binarize_delta=binarize_delta,
            sensitivity_threshold=sensitivity_threshold
        )
        self.binarize_delta = config.binarize_delta
        self.sensitivity_threshold = config.sensitivity_threshold

        # State
        self._reference: Optional[np.ndarray] = None

    @classmethod
    def from_config(cls, config: MotionConfig) -> "FrameDifferenceDetector":
        return cls(
            binarize_delta=config.binarize_delta,
            sensitivity_threshold=config.sensitivity_threshold
        )

    def evaluate(self, frame: np.ndarray) -> MotionResult:
        """
        Score a preprocessed frame against the reference.

        The caller hands the frame over; it becomes the new reference and
        must not be modified afterwards.

        Args:
            frame: Single-channel uint8 image from the preprocessor

        Returns:
            MotionResult with the decision and score

        Raises:
            ResolutionMismatch: frame shape differs from the reference. The
                reference has already been replaced by frame when this is raised.
        """
        start = time.time()
        reference = self._reference

        # First frame (or after reset) - seed the reference
        if reference is None:
            self._reference = frame
            return MotionResult(
                detected=False,
                score=0,
                initialized_reference=True,
                timestamp=start,
                process_time_ms=(time.time() - start) * 1000
            )

        if reference.shape != frame.shape:
            self._reference = frame
            raise ResolutionMismatch(reference.shape, frame.shape)

        diff = cv2.absdiff(reference, frame)
        _, binary = cv2.threshold(diff, self.binarize_delta, 255, cv2.THRESH_BINARY)
        score = int(np.sum(binary, dtype=np.uint64))

        # Rebind, never write into the old reference
        self._reference = frame

        return MotionResult(
            detected=score > self.sensitivity_threshold,
            score=score,
            timestamp=start,
            process_time_ms=(time.time() - start) * 1000
        )

    def reset(self) -> None:
        """Drop the reference; the next evaluate() seeds a new one."""
        self._reference = None

    @property
    def reference(self) -> Optional[np.ndarray]:
        return self._reference

    @property
    def has_reference(self) -> bool:
        return self._reference is not None


# =============================================================================
# TEST - Run this file directly to test
# =============================================================================
if __name__ == "__main__":
    from .preprocess import preprocess

    print("=" * 60)
    print("  FRAME DIFFERENCE TEST")
    print("=" * 60)
    print("\nPress 'q' to quit\n")

    cap = cv2.VideoCapture(0)
    if not cap.isOpened():
        print("ERROR: Could not open camera")
        raise SystemExit(1)

    detector = FrameDifferenceDetector()

    while True:
        ret, frame = cap.read()
        if not ret:
            continue

        result = detector.evaluate(preprocess(frame))

        status = f"Motion: {result.detected} | Score: {result.score} | {result.process_time_ms:.1f}ms"
        color = (0, 0, 255) if result.detected else (0, 255, 0)
        cv2.putText(frame, status, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.6, color, 2)
        cv2.imshow("Frame Difference", frame)

        if cv2.waitKey(30) & 0xFF == ord('q'):
            break

    cap.release()
    cv2.destroyAllWindows()
