# Perception Layer - Preprocessing and Motion Detection
from .preprocess import Preprocessor, preprocess
from .motion import FrameDifferenceDetector

__all__ = ["Preprocessor", "preprocess", "FrameDifferenceDetector"]
