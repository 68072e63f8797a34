#!/usr/bin/env python3
"""
Monitor configuration with validation.

All configs are frozen dataclasses for immutability. Tuning constants
(blur kernel, binarization delta, sensitivity threshold, cadence) live here
instead of in the algorithms.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Optional, Tuple


DEFAULT_POSITION_PATH = str(Path.home() / ".motion_monitor" / "position.json")


# =============================================================================
# COMPONENT CONFIGS
# =============================================================================

@dataclass(frozen=True)
class CameraConfig:
    """Camera device configuration."""
    device_index: int = 0
    frame_width: Optional[int] = None      # None = driver default
    frame_height: Optional[int] = None
    read_timeout_ms: Optional[int] = None  # Only honored by some backends

    def __post_init__(self):
        if self.device_index < 0:
            raise ValueError(f"device_index must be >= 0, got {self.device_index}")
        for name in ("frame_width", "frame_height", "read_timeout_ms"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be > 0, got {value}")


@dataclass(frozen=True)
class PreprocessConfig:
    """Grayscale + blur configuration."""
    blur_kernel: int = 21  # Gaussian kernel size (odd)

    def __post_init__(self):
        if self.blur_kernel < 1 or self.blur_kernel % 2 == 0:
            raise ValueError(f"blur_kernel must be a positive odd number, got {self.blur_kernel}")


@dataclass(frozen=True)
class MotionConfig:
    """Motion detection configuration."""
    binarize_delta: int = 25               # Pixel difference threshold (1-255)
    sensitivity_threshold: int = 300000    # Motion score cutoff
    reset_reference_on_resume: bool = True

    def __post_init__(self):
        if not 1 <= self.binarize_delta <= 255:
            raise ValueError(f"binarize_delta must be 1-255, got {self.binarize_delta}")
        if self.sensitivity_threshold < 0:
            raise ValueError(
                f"sensitivity_threshold must be >= 0, got {self.sensitivity_threshold}"
            )


@dataclass(frozen=True)
class AlertConfig:
    """Border flash and feed preview configuration."""
    border_color: Tuple[int, int, int] = (0, 0, 255)  # BGR red
    border_width: int = 40
    flash_duration_ms: int = 200
    preview_duration_ms: int = 5000
    preview_fps: int = 10
    preview_width: int = 320
    preview_height: int = 240

    # Used to place the border windows
    screen_width: int = 1920
    screen_height: int = 1080

    def __post_init__(self):
        if len(self.border_color) != 3 or any(not 0 <= c <= 255 for c in self.border_color):
            raise ValueError(f"border_color must be three 0-255 values, got {self.border_color}")
        if self.flash_duration_ms < 0:
            raise ValueError(f"flash_duration_ms must be >= 0, got {self.flash_duration_ms}")
        if self.preview_duration_ms < 0:
            raise ValueError(f"preview_duration_ms must be >= 0, got {self.preview_duration_ms}")
        if self.preview_fps < 1:
            raise ValueError(f"preview_fps must be >= 1, got {self.preview_fps}")
        if self.border_width < 1:
            raise ValueError(f"border_width must be >= 1, got {self.border_width}")
        if self.border_width * 2 > min(self.screen_width, self.screen_height):
            raise ValueError("border_width too large for screen size")
        if self.preview_width < 1 or self.preview_height < 1:
            raise ValueError("preview size must be positive")


# =============================================================================
# MONITOR CONFIG
# =============================================================================

@dataclass(frozen=True)
class MonitorConfig:
    """Complete monitor configuration."""
    camera: CameraConfig = field(default_factory=CameraConfig)
    preprocess: PreprocessConfig = field(default_factory=PreprocessConfig)
    motion: MotionConfig = field(default_factory=MotionConfig)
    alert: AlertConfig = field(default_factory=AlertConfig)

    # Loop behavior
    cycle_delay_ms: int = 30           # Fixed sleep between cycles
    max_consecutive_empty: int = 0     # Empty reads before giving up (0 = never)

    # Position store
    position_path: str = DEFAULT_POSITION_PATH
    default_position: Tuple[int, int] = (50, 50)

    def __post_init__(self):
        if self.cycle_delay_ms < 0:
            raise ValueError(f"cycle_delay_ms must be >= 0, got {self.cycle_delay_ms}")
        if self.max_consecutive_empty < 0:
            raise ValueError(
                f"max_consecutive_empty must be >= 0, got {self.max_consecutive_empty}"
            )
        if len(self.default_position) != 2:
            raise ValueError(f"default_position must be (x, y), got {self.default_position}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MonitorConfig":
        """Create config from dictionary (e.g., YAML file)."""
        data = data or {}
        alert = dict(data.get("alert") or {})
        if "border_color" in alert:
            alert["border_color"] = tuple(alert["border_color"])
        return cls(
            camera=CameraConfig(**(data.get("camera") or {})),
            preprocess=PreprocessConfig(**(data.get("preprocess") or {})),
            motion=MotionConfig(**(data.get("motion") or {})),
            alert=AlertConfig(**alert),
            cycle_delay_ms=data.get("cycle_delay_ms", 30),
            max_consecutive_empty=data.get("max_consecutive_empty", 0),
            position_path=data.get("position_path", DEFAULT_POSITION_PATH),
            default_position=tuple(data.get("default_position", (50, 50))),
        )

    @classmethod
    def from_yaml(cls, path: str) -> "MonitorConfig":
        """Load config from YAML file."""
        import yaml
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "camera": {
                "device_index": self.camera.device_index,
                "frame_width": self.camera.frame_width,
                "frame_height": self.camera.frame_height,
                "read_timeout_ms": self.camera.read_timeout_ms,
            },
            "preprocess": {
                "blur_kernel": self.preprocess.blur_kernel,
            },
            "motion": {
                "binarize_delta": self.motion.binarize_delta,
                "sensitivity_threshold": self.motion.sensitivity_threshold,
                "reset_reference_on_resume": self.motion.reset_reference_on_resume,
            },
            "alert": {
                "border_color": list(self.alert.border_color),
                "border_width": self.alert.border_width,
                "flash_duration_ms": self.alert.flash_duration_ms,
                "preview_duration_ms": self.alert.preview_duration_ms,
                "preview_fps": self.alert.preview_fps,
                "preview_width": self.alert.preview_width,
                "preview_height": self.alert.preview_height,
                "screen_width": self.alert.screen_width,
                "screen_height": self.alert.screen_height,
            },
            "cycle_delay_ms": self.cycle_delay_ms,
            "max_consecutive_empty": self.max_consecutive_empty,
            "position_path": self.position_path,
            "default_position": list(self.default_position),
        }


# =============================================================================
# DEFAULT CONFIGS
# =============================================================================

DEFAULT_CONFIG = MonitorConfig()

# Smaller movements trigger, lighter blur
SENSITIVE_CONFIG = MonitorConfig(
    preprocess=PreprocessConfig(blur_kernel=9),
    motion=MotionConfig(binarize_delta=20, sensitivity_threshold=100000),
)

# Busy scenes, flickering light
RELAXED_CONFIG = MonitorConfig(
    motion=MotionConfig(binarize_delta=35, sensitivity_threshold=1000000),
    cycle_delay_ms=60,
)

PRESETS: Dict[str, MonitorConfig] = {
    "default": DEFAULT_CONFIG,
    "sensitive": SENSITIVE_CONFIG,
    "relaxed": RELAXED_CONFIG,
}
