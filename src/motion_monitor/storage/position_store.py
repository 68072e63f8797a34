#!/usr/bin/env python3
"""
Alert Position Store - JSON File
================================
Persists the preview window coordinate as {"x": int, "y": int}.
Read once at startup, overwritten whenever the user confirms a new one.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from ..core.models import AlertPosition

logger = logging.getLogger(__name__)


class JsonPositionStore:
    """
    File-backed position record.

    A missing or unreadable file yields the default position; the bad file
    is left alone until the next save overwrites it.
    """

    def __init__(self, path: str, default: Optional[AlertPosition] = None):
        """
        Args:
            path: JSON file location (parent directories are created on save)
            default: Fallback when nothing usable is stored
        """
        self.path = Path(path).expanduser()
        self.default = default or AlertPosition(50, 50)

    def load(self) -> AlertPosition:
        """Stored position, or the default."""
        if not self.path.exists():
            logger.info(f"No stored position at {self.path}, using {self.default.to_tuple()}")
            return self.default

        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
            position = AlertPosition.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Could not read position from {self.path}: {e}")
            return self.default

        logger.info(f"Loaded position {position.to_tuple()} from {self.path}")
        return position

    def save(self, position: AlertPosition) -> None:
        """Overwrite the stored record atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=".position-", suffix=".json"
        )
        try:
            with os.fdopen(fd, 'w') as f:
                json.dump(position.to_dict(), f)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

        logger.info(f"Saved position {position.to_tuple()} to {self.path}")
