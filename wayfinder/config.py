"""Policy constants for the guidance engine.

Every numeric policy of the engine (filter window, step thresholds, debounce
and throttle intervals, alignment tolerance, step budget and blueprint
canvas) lives in one frozen dataclass so that each component can be tested
with extreme settings independently.

Example:
    >>> config = GuidanceConfig()
    >>> config.step_debounce_s
    0.6
    >>> strict = GuidanceConfig(alignment_threshold_deg=5.0)
    >>> GuidanceConfig.from_dict({"start_steps": 25}).start_steps
    25
"""

import json
import warnings
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union


@dataclass(frozen=True)
class GuidanceConfig:
    """Named policy values for the heading filter, step detector and guidance.

    Attributes:
        heading_window: Capacity of the compass ring buffer (samples).
        step_up_threshold: Vertical acceleration above which the detector
                           enters the UP phase. Units: m/s².
        step_down_threshold: Vertical acceleration below which the detector
                             returns to the DOWN phase. Units: m/s².
        step_debounce_s: Minimum interval between two counted steps. Units: s.
        motion_throttle_s: Motion samples closer than this to the previously
                           accepted sample are ignored. Units: s.
        alignment_threshold_deg: Maximum |turn angle| still reported as
                                 facing the correct direction. Units: degrees.
        start_steps: Step countdown loaded each time guidance starts.
        blueprint_margin: Extra shrink factor applied to the blueprint scale
                          so the rotated map never touches the canvas edge.
        canvas_width: Blueprint canvas width in plan units.
        canvas_height: Blueprint canvas height in plan units.
        snap_step_deg: Blueprint rotation snapping step. Units: degrees.
        room_width: Width of a room rectangle drawn around its centre.
        room_height: Height of a room rectangle drawn around its centre.
    """

    heading_window: int = 10
    step_up_threshold: float = 11.0
    step_down_threshold: float = 9.0
    step_debounce_s: float = 0.6
    motion_throttle_s: float = 0.1
    alignment_threshold_deg: float = 20.0
    start_steps: int = 10
    blueprint_margin: float = 0.95
    canvas_width: float = 300.0
    canvas_height: float = 400.0
    snap_step_deg: float = 90.0
    room_width: float = 135.0
    room_height: float = 150.0

    def __post_init__(self) -> None:
        """Validate policy values."""
        if not isinstance(self.heading_window, int) or self.heading_window < 1:
            raise ValueError(
                f"heading_window must be a positive integer, got {self.heading_window}"
            )
        if not isinstance(self.start_steps, int) or self.start_steps < 0:
            raise ValueError(
                f"start_steps must be a non-negative integer, got {self.start_steps}"
            )
        if self.step_down_threshold >= self.step_up_threshold:
            raise ValueError(
                f"step_down_threshold ({self.step_down_threshold}) must be below "
                f"step_up_threshold ({self.step_up_threshold})"
            )
        if self.step_debounce_s < 0:
            raise ValueError(f"step_debounce_s must be non-negative, got {self.step_debounce_s}")
        if self.motion_throttle_s < 0:
            raise ValueError(
                f"motion_throttle_s must be non-negative, got {self.motion_throttle_s}"
            )
        if not 0.0 <= self.alignment_threshold_deg <= 180.0:
            raise ValueError(
                f"alignment_threshold_deg must be in [0, 180], got {self.alignment_threshold_deg}"
            )
        if not 0.0 < self.blueprint_margin <= 1.0:
            raise ValueError(f"blueprint_margin must be in (0, 1], got {self.blueprint_margin}")
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ValueError(
                f"canvas size must be positive, got {self.canvas_width} x {self.canvas_height}"
            )
        if self.snap_step_deg <= 0:
            raise ValueError(f"snap_step_deg must be positive, got {self.snap_step_deg}")
        if self.room_width <= 0 or self.room_height <= 0:
            raise ValueError(
                f"room size must be positive, got {self.room_width} x {self.room_height}"
            )

        # A debounce shorter than the throttle can never reject anything
        if self.step_debounce_s < self.motion_throttle_s:
            warnings.warn(
                f"step_debounce_s ({self.step_debounce_s}s) is shorter than "
                f"motion_throttle_s ({self.motion_throttle_s}s); the debounce "
                f"will have no effect.",
                UserWarning
            )

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "GuidanceConfig":
        """Build a config from a (possibly partial) dictionary.

        Args:
            values: Mapping of field name to value. Missing fields keep
                    their defaults.

        Returns:
            New GuidanceConfig.

        Raises:
            ValueError: If the mapping contains unknown keys.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown GuidanceConfig keys: {unknown}")
        return cls(**values)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "GuidanceConfig":
        """Load a config from a JSON file holding a flat object."""
        with open(path) as f:
            values = json.load(f)
        if not isinstance(values, dict):
            raise ValueError(f"{path} must contain a JSON object, got {type(values).__name__}")
        return cls.from_dict(values)

    def to_dict(self) -> Dict[str, Any]:
        """Return the config as a plain dictionary (JSON serializable)."""
        return asdict(self)
