"""
Configuration for the sticker flowfield.

All tuning constants live on a single dataclass so several independent
fields can run side by side with different settings.
"""

import json
import math
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Tuple


class FlowDirection(str, Enum):
    """Directional bias added to the sampled flow angle."""

    FLOWFIELD = "flowfield"  # free drift
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def bias(self) -> float:
        return FLOW_ANGLES[self]


FLOW_ANGLES = {
    FlowDirection.FLOWFIELD: 0.0,
    FlowDirection.DOWN: math.pi / 2,
    FlowDirection.UP: -math.pi / 2,
    FlowDirection.LEFT: math.pi,
    FlowDirection.RIGHT: 0.0,
}


@dataclass
class FieldConfig:
    """Configuration for the sticker flowfield."""

    width: int = 1280
    height: int = 720
    fps: int = 60

    # Stickers
    palette: List[str] = field(
        default_factory=lambda: ["#ffd400", "#ff3d77", "#2dd4bf", "#6366f1"]
    )
    outline_px: int = 5
    sticker_size: int = 80
    use_sticker_images: bool = True
    sticker_paths: List[str] = field(default_factory=list)

    # Spacing & density
    particle_padding: float = 100.0  # Minimum spacing between stickers (px)
    base_density: float = 0.00008  # Particles per square pixel
    min_particles: int = 12

    # Flow
    noise_scale: float = 0.007
    noise_speed: float = 0.0025
    drag: float = 0.90
    accel: float = 0.07
    max_vel: float = 1.6
    jitter: float = 0.07
    repulsion_strength: float = 0.12
    flow_direction: FlowDirection = FlowDirection.UP

    # Background
    trail_alpha: int = 200  # 0-255, alpha of the per-frame background wash
    background_color: Tuple[int, int, int] = (227, 223, 242)
    reset_color: Tuple[int, int, int] = (0, 255, 230)

    # Pointer
    mouse_enabled: bool = True
    mouse_radius: float = 240.0
    mouse_force: float = 0.35
    mouse_exp: float = 1.5
    reset_cooldown_ms: int = 600

    # Reduced motion
    reduced_motion: bool = False
    reduced_density_scale: float = 0.6
    reduced_noise_speed_scale: float = 0.5

    # Lifecycle
    intersection_threshold: float = 0.1

    # Overlay
    show_legend: bool = True
    accent_color: Tuple[int, int, int] = (255, 212, 0)
    ink_color: Tuple[int, int, int] = (17, 17, 17)

    def __post_init__(self):
        self.flow_direction = FlowDirection(self.flow_direction)
        self.background_color = tuple(self.background_color)
        self.reset_color = tuple(self.reset_color)
        self.accent_color = tuple(self.accent_color)
        self.ink_color = tuple(self.ink_color)
        if not 0 <= self.trail_alpha <= 255:
            raise ValueError(f"trail_alpha must be within 0-255, got {self.trail_alpha}")
        if self.sticker_size <= 0:
            raise ValueError(f"sticker_size must be positive, got {self.sticker_size}")

    @property
    def density_scale(self) -> float:
        return self.reduced_density_scale if self.reduced_motion else 1.0

    @property
    def time_step(self) -> float:
        """Noise-time advance per running tick."""
        if self.reduced_motion:
            return self.noise_speed * self.reduced_noise_speed_scale
        return self.noise_speed

    @property
    def wrap_margin(self) -> float:
        return self.sticker_size / 2

    def as_dict(self) -> Dict[str, Any]:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["flow_direction"] = self.flow_direction.value
        return data


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    """Convert ``#rrggbb`` (or ``rrggbb``) to an RGB tuple."""
    value = value.lstrip("#")
    if len(value) != 6:
        raise ValueError(f"Expected a 6-digit hex colour, got {value!r}")
    return tuple(int(value[i:i + 2], 16) for i in (0, 2, 4))


def config_from_dict(data: Dict[str, Any], **overrides) -> FieldConfig:
    """
    Build a FieldConfig from a plain dict (e.g. parsed JSON).

    Raises:
        ValueError: On unknown keys or invalid values.
    """
    known = {f.name for f in fields(FieldConfig)}
    merged = {**data, **{k: v for k, v in overrides.items() if v is not None}}
    unknown = sorted(set(merged) - known)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
    return FieldConfig(**merged)


def load_config(path: Path, **overrides) -> FieldConfig:
    """Load a JSON config file, letting explicit overrides win."""
    with open(path) as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a JSON object: {path}")
    return config_from_dict(data, **overrides)
