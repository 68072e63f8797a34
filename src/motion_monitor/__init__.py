#!/usr/bin/env python3
"""
Camera Motion Monitor.

Frame-over-frame motion detection on a live camera with a border flash
and a timed feed preview as the alert.
"""

__version__ = "1.0.0"
