#!/usr/bin/env python3
"""
Camera Motion Monitor
=====================
Watches a camera and flashes the screen border when motion is detected.

Run:
  python -m motion_monitor
  python -m motion_monitor --camera 1 --preset sensitive
  python -m motion_monitor --headless --no-controls
"""

import argparse
import dataclasses
import logging
import sys

import yaml

from .app import MotionMonitorApp
from .core.config import MonitorConfig, PRESETS


def build_config(args: argparse.Namespace) -> MonitorConfig:
    """Preset or YAML file, then command-line overrides."""
    if args.config:
        config = MonitorConfig.from_yaml(args.config)
    else:
        config = PRESETS[args.preset]

    if args.camera is not None:
        config = dataclasses.replace(
            config, camera=dataclasses.replace(config.camera, device_index=args.camera)
        )
    if args.threshold is not None:
        config = dataclasses.replace(
            config, motion=dataclasses.replace(config.motion, sensitivity_threshold=args.threshold)
        )
    if args.position_file:
        config = dataclasses.replace(config, position_path=args.position_file)

    return config


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Camera Motion Monitor")
    parser.add_argument("--camera", "-c", type=int, default=None, help="Camera device index")
    parser.add_argument("--config", help="YAML config file")
    parser.add_argument("--preset", choices=sorted(PRESETS), default="default",
                        help="Built-in config (ignored with --config)")
    parser.add_argument("--threshold", "-t", type=int, default=None, help="Sensitivity threshold")
    parser.add_argument("--position-file", help="Where the preview position is stored")
    parser.add_argument("--headless", action="store_true", help="Log alerts instead of drawing")
    parser.add_argument("--no-controls", action="store_true", help="Disable console commands")
    parser.add_argument("--max-cycles", "-n", type=int, default=0, help="Max cycles (0=unlimited)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    # Setup logging
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        config = build_config(args)
    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    app = MotionMonitorApp(
        config=config,
        headless=args.headless,
        enable_controls=not args.no_controls
    )
    return app.run(max_cycles=args.max_cycles)


if __name__ == "__main__":
    sys.exit(main())
