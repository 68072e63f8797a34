#!/usr/bin/env python3
"""
Monitor loop and shared state.

The loop drives capture -> preprocess -> evaluate -> alert at a fixed cadence.
"""

from .state import MonitorState
from .loop import MonitorLoop

__all__ = [
    "MonitorState",
    "MonitorLoop",
]
