#!/usr/bin/env python3
"""
Control Surface Tests

Shared state, console commands, the JSON position store, the event bus,
the camera wrapper (VideoCapture mocked) and application wiring.
"""

import json
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

import numpy as np

# Add src and tests to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

from motion_monitor.app import MotionMonitorApp
from motion_monitor.capture.camera import CameraSource
from motion_monitor.controls.console import HELP_TEXT, ConsoleControls
from motion_monitor.core.config import CameraConfig, MonitorConfig
from motion_monitor.core.errors import CaptureEmpty, CaptureError, DeviceUnavailable
from motion_monitor.core.events import Event, EventBus, EventType
from motion_monitor.core.models import AlertPosition
from motion_monitor.core.protocols import FrameSource, PositionStore
from motion_monitor.monitor.state import MonitorState
from motion_monitor.storage.position_store import JsonPositionStore

from fakes import FakeSource, MemoryPositionStore, solid_frame


class TestMonitorState(unittest.TestCase):
    """Pause/running flags and position."""

    def setUp(self):
        self.bus = EventBus()
        self.events = []
        self.bus.subscribe(None, self.events.append)
        self.state = MonitorState(AlertPosition(50, 50), event_bus=self.bus)

    def test_pause_resume(self):
        self.assertFalse(self.state.paused)
        self.assertTrue(self.state.pause())
        self.assertFalse(self.state.pause())  # already paused
        self.assertTrue(self.state.paused)
        self.assertTrue(self.state.resume())
        self.assertFalse(self.state.paused)

        types = [e.type for e in self.events]
        self.assertEqual(types, [EventType.PAUSED, EventType.RESUMED])

    def test_toggle(self):
        self.assertTrue(self.state.toggle_pause())
        self.assertFalse(self.state.toggle_pause())

    def test_stop(self):
        self.assertTrue(self.state.running)
        self.state.stop()
        self.assertFalse(self.state.running)

    def test_set_position(self):
        self.state.set_position(AlertPosition(100, 200))

        self.assertEqual(self.state.position, AlertPosition(100, 200))
        self.assertEqual(self.events[-1].type, EventType.POSITION_CHANGED)
        self.assertEqual(self.events[-1].data, {"x": 100, "y": 200})


class TestConsoleControls(unittest.TestCase):
    """Command handling."""

    def setUp(self):
        self.state = MonitorState(AlertPosition(50, 50))
        self.store = MemoryPositionStore()
        self.controls = ConsoleControls(self.state, self.store)

    def test_pause_commands(self):
        self.assertEqual(self.controls.handle_command("p"), "Paused")
        self.assertTrue(self.state.paused)
        self.assertEqual(self.controls.handle_command("resume"), "Resumed")
        self.assertFalse(self.state.paused)
        self.assertEqual(self.controls.handle_command("t"), "Paused")
        self.assertEqual(self.controls.handle_command("TOGGLE"), "Resumed")

    def test_move_saves_then_applies(self):
        reply = self.controls.handle_command("move 300 400")

        self.assertEqual(reply, "Preview moved to (300, 400)")
        self.assertEqual(self.store.saved, [AlertPosition(300, 400)])
        self.assertEqual(self.state.position, AlertPosition(300, 400))

    def test_move_rejects_bad_input(self):
        self.assertEqual(self.controls.handle_command("m 10"), "Usage: move X Y")
        self.assertEqual(self.controls.handle_command("m a b"), "Usage: move X Y (integers)")
        self.assertEqual(self.controls.handle_command("m -1 5"), "Position must be non-negative")
        self.assertEqual(self.store.saved, [])
        self.assertEqual(self.state.position, AlertPosition(50, 50))

    def test_move_save_failure_still_applies(self):
        controls = ConsoleControls(self.state, MemoryPositionStore(error=OSError("read-only")))
        reply = controls.handle_command("m 5 6")

        self.assertIn("not saved", reply)
        self.assertEqual(self.state.position, AlertPosition(5, 6))

    def test_status(self):
        controls = ConsoleControls(
            self.state, self.store, status_provider=lambda: {"status": "MONITORING"}
        )
        reply = controls.handle_command("s")

        self.assertIn("Paused: False", reply)
        self.assertIn("Position: (50, 50)", reply)
        self.assertIn("status: MONITORING", reply)

    def test_help_unknown_and_blank(self):
        self.assertEqual(self.controls.handle_command("help"), HELP_TEXT)
        self.assertIn("Unknown command", self.controls.handle_command("jump"))
        self.assertEqual(self.controls.handle_command("   "), "")

    def test_quit(self):
        self.assertEqual(self.controls.handle_command("q"), "Stopping...")
        self.assertFalse(self.state.running)

    def test_run_until_quit(self):
        lines = iter(["p", "m 1 2", "q", "p"])
        output = []
        controls = ConsoleControls(
            self.state, self.store,
            input_fn=lambda prompt: next(lines),
            output_fn=output.append
        )
        controls.run()

        self.assertEqual(output[0], HELP_TEXT)
        self.assertEqual(output[1:], ["Paused", "Preview moved to (1, 2)", "Stopping..."])

    def test_run_stops_on_eof(self):
        def closed(prompt):
            raise EOFError

        output = []
        ConsoleControls(self.state, self.store, input_fn=closed, output_fn=output.append).run()

        self.assertEqual(output, [HELP_TEXT])
        self.assertTrue(self.state.running)

    def test_start_runs_daemon_thread(self):
        controls = ConsoleControls(
            self.state, self.store,
            input_fn=lambda prompt: "q",
            output_fn=lambda text: None
        )
        thread = controls.start()
        thread.join(timeout=2)

        self.assertTrue(thread.daemon)
        self.assertFalse(self.state.running)


class TestJsonPositionStore(unittest.TestCase):
    """File-backed position persistence."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "nested" / "position.json"

    def tearDown(self):
        self.tmp.cleanup()

    def test_missing_file_gives_default(self):
        store = JsonPositionStore(str(self.path), default=AlertPosition(7, 8))
        self.assertEqual(store.load(), AlertPosition(7, 8))

    def test_save_and_load(self):
        store = JsonPositionStore(str(self.path))
        store.save(AlertPosition(640, 360))

        self.assertEqual(json.loads(self.path.read_text()), {"x": 640, "y": 360})
        self.assertEqual(JsonPositionStore(str(self.path)).load(), AlertPosition(640, 360))
        self.assertEqual(list(self.path.parent.iterdir()), [self.path])

    def test_corrupt_file_gives_default(self):
        self.path.parent.mkdir(parents=True)
        for content in ("not json", '{"x": 1}', '[1, 2]'):
            self.path.write_text(content)
            store = JsonPositionStore(str(self.path))
            self.assertEqual(store.load(), AlertPosition(50, 50))

    def test_protocols(self):
        self.assertIsInstance(JsonPositionStore(str(self.path)), PositionStore)
        self.assertIsInstance(FakeSource(), FrameSource)


class TestEventBus(unittest.TestCase):
    """Subscription and error isolation."""

    def test_typed_and_global_handlers(self):
        bus = EventBus()
        typed, everything = [], []
        bus.subscribe(EventType.PAUSED, typed.append)
        bus.subscribe(None, everything.append)

        bus.emit_simple(EventType.PAUSED, source="test")
        bus.emit_simple(EventType.RESUMED, source="test")

        self.assertEqual(len(typed), 1)
        self.assertEqual(len(everything), 2)
        self.assertIsInstance(typed[0], Event)
        self.assertEqual(typed[0].source, "test")

    def test_unsubscribe(self):
        bus = EventBus()
        seen = []
        bus.subscribe(EventType.PAUSED, seen.append)
        self.assertTrue(bus.unsubscribe(EventType.PAUSED, seen.append))
        bus.emit_simple(EventType.PAUSED)

        self.assertEqual(seen, [])

    def test_handler_error_isolated(self):
        bus = EventBus()
        seen = []

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe(None, broken)
        bus.subscribe(None, seen.append)
        bus.emit_simple(EventType.MOTION_DETECTED, score=1)

        self.assertEqual(len(seen), 1)


class TestCameraSource(unittest.TestCase):
    """VideoCapture wrapper with the device mocked."""

    def make_capture(self, opened=True, reads=None):
        cap = MagicMock()
        cap.isOpened.return_value = opened
        cap.read.side_effect = reads or []
        cap.get.return_value = 640
        return cap

    def test_open_failure(self):
        cap = self.make_capture(opened=False)
        with patch("motion_monitor.capture.camera.cv2.VideoCapture", return_value=cap):
            with self.assertRaises(DeviceUnavailable):
                CameraSource(3).open()

        cap.release.assert_called_once()

    def test_read_outcomes(self):
        frame = solid_frame(1)
        cap = self.make_capture(reads=[(True, frame), (False, None)])
        with patch("motion_monitor.capture.camera.cv2.VideoCapture", return_value=cap):
            with CameraSource.from_config(CameraConfig(device_index=1)) as source:
                self.assertIs(source.read(), frame)
                with self.assertRaises(CaptureEmpty):
                    source.read()

                cap.isOpened.return_value = False
                cap.read.side_effect = [(False, None)]
                with self.assertRaises(CaptureError):
                    source.read()

        self.assertIsNone(source.cap)

    def test_read_before_open(self):
        with self.assertRaises(CaptureError):
            CameraSource().read()

    def test_resolution_properties_applied(self):
        cap = self.make_capture()
        with patch("motion_monitor.capture.camera.cv2.VideoCapture", return_value=cap) as ctor:
            source = CameraSource(0, frame_width=1280, frame_height=720).open()

        ctor.assert_called_once_with(0)
        self.assertEqual(cap.set.call_count, 2)
        self.assertEqual(source.resolution, (640, 640))
        source.release()
        cap.release.assert_called_once()


class TestMotionMonitorApp(unittest.TestCase):
    """Application wiring (headless)."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.config = MonitorConfig(position_path=str(Path(self.tmp.name) / "pos.json"))

    def tearDown(self):
        self.tmp.cleanup()

    def test_camera_missing_returns_1(self):
        app = MotionMonitorApp(self.config, headless=True, enable_controls=False)
        app.loop._source_factory = lambda camera: FakeSource(available=False)

        self.assertEqual(app.run(), 1)
        self.assertFalse(app.state.running)

    def test_headless_run(self):
        app = MotionMonitorApp(self.config, headless=True, enable_controls=False)
        app.loop._sleep = lambda seconds: None
        source = FakeSource([solid_frame(0), solid_frame(255)])
        app.loop._source_factory = lambda camera: source

        self.assertEqual(app.run(max_cycles=2), 0)
        self.assertEqual(app.loop.stats.alerts, 1)
        self.assertTrue(source.released)

        status = app.get_status()
        self.assertEqual(status["status"], "STOPPED")
        self.assertEqual(status["threshold"], 300000)

    def test_stored_position_loaded(self):
        JsonPositionStore(self.config.position_path).save(AlertPosition(11, 22))
        app = MotionMonitorApp(self.config, headless=True, enable_controls=False)

        self.assertEqual(app.state.position, AlertPosition(11, 22))

    def test_preprocessed_frame_shape(self):
        """The loop's preprocessor yields 2-D frames for the detector."""
        app = MotionMonitorApp(self.config, headless=True, enable_controls=False)
        gray = app.loop.preprocessor.process(solid_frame(0))

        self.assertEqual(gray.shape, (480, 640))
        self.assertEqual(gray.dtype, np.uint8)


if __name__ == "__main__":
    unittest.main(verbosity=2)
