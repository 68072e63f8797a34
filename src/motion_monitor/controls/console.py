#!/usr/bin/env python3
"""
Console Control Surface
=======================
Pause/resume and preview repositioning from the terminal.

Runs on its own thread and talks to the monitor only through
MonitorState. A confirmed position is saved to the store first, then
published to the loop.
"""

import logging
import threading
from typing import Callable, Optional

from ..core.models import AlertPosition
from ..core.protocols import PositionStore
from ..monitor.state import MonitorState

logger = logging.getLogger(__name__)


HELP_TEXT = """Commands:
  p, pause        Pause monitoring
  r, resume       Resume monitoring
  t, toggle       Toggle pause
  m, move X Y     Move the preview to screen position (X, Y)
  s, status       Show monitor status
  h, help         Show this help
  q, quit         Stop the monitor"""


class ConsoleControls:
    """
    Line-based command reader.

    handle_command() is the whole command set; run() just feeds it lines
    until quit or end of input.
    """

    def __init__(
        self,
        state: MonitorState,
        store: PositionStore,
        status_provider: Optional[Callable[[], dict]] = None,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print
    ):
        """
        Args:
            state: Shared monitor state (this object is its only writer)
            store: Where confirmed positions are persisted
            status_provider: Returns a status dict for the 'status' command
            input_fn: Line reader (input by default)
            output_fn: Line writer (print by default)
        """
        self.state = state
        self.store = store
        self.status_provider = status_provider
        self._input = input_fn
        self._output = output_fn
        self._thread: Optional[threading.Thread] = None

    def start(self) -> threading.Thread:
        """Run the reader on a daemon thread."""
        self._thread = threading.Thread(target=self.run, name="console-controls", daemon=True)
        self._thread.start()
        return self._thread

    def run(self) -> None:
        """Read commands until quit or EOF."""
        self._output(HELP_TEXT)
        while self.state.running:
            try:
                line = self._input("> ")
            except EOFError:
                logger.debug("Console input closed")
                return

            reply = self.handle_command(line)
            if reply:
                self._output(reply)

    def handle_command(self, line: str) -> str:
        """
        Apply one command.

        Returns:
            Text to show the user
        """
        parts = line.strip().split()
        if not parts:
            return ""

        command, args = parts[0].lower(), parts[1:]

        if command in ("p", "pause"):
            self.state.pause()
            return "Paused"

        if command in ("r", "resume"):
            self.state.resume()
            return "Resumed"

        if command in ("t", "toggle"):
            return "Paused" if self.state.toggle_pause() else "Resumed"

        if command in ("m", "move"):
            return self._move(args)

        if command in ("s", "status"):
            return self._status()

        if command in ("h", "help", "?"):
            return HELP_TEXT

        if command in ("q", "quit", "exit"):
            self.state.stop()
            return "Stopping..."

        return f"Unknown command: {command} (type 'help')"

    def _move(self, args) -> str:
        if len(args) != 2:
            return "Usage: move X Y"
        try:
            position = AlertPosition(int(args[0]), int(args[1]))
        except ValueError:
            return "Usage: move X Y (integers)"
        if position.x < 0 or position.y < 0:
            return "Position must be non-negative"

        try:
            self.store.save(position)
        except OSError as e:
            # Still apply it for this run
            logger.error(f"Could not save position: {e}")
            self.state.set_position(position)
            return f"Preview moved to {position.to_tuple()} (not saved: {e})"

        self.state.set_position(position)
        return f"Preview moved to {position.to_tuple()}"

    def _status(self) -> str:
        lines = [
            f"Paused: {self.state.paused}",
            f"Position: {self.state.position.to_tuple()}",
        ]
        if self.status_provider:
            for key, value in self.status_provider().items():
                lines.append(f"{key}: {value}")
        return "\n".join(lines)
