"""
Data structures for the compass and motion sensor streams.

This module defines the sample packets pushed by the sensor sources and the
events produced by the step detector:
    - HeadingSample: one raw compass reading
    - MotionSample: one vertical acceleration reading
    - StepPhase: two-state hysteresis phase of the step detector
    - StepEvent: one detected (and debounced) step

Time Base Convention:
    All timestamps are float seconds from a monotonic clock.

Frame Conventions:
    - Compass angles are degrees, 0 = North, increasing clockwise. Sources
      may deliver true-north (absolute) or device-relative angles; both are
      handled identically by the guidance engine.
    - Motion samples carry only the z component of the device acceleration
      (sensor frame, m/s²).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

import numpy as np


class StepPhase(Enum):
    """Hysteresis phase of the step detector."""

    DOWN = "down"
    UP = "up"


@dataclass(frozen=True)
class HeadingSample:
    """
    Raw compass reading.

    Attributes:
        angle_deg: Compass angle in degrees. Expected in [0, 360); other
                   finite values are accepted and wrapped by the filter.
        absolute: True if the angle is referenced to true north, False if
                  it is relative to the device's initial orientation.

    Example:
        >>> sample = HeadingSample(angle_deg=359.0, absolute=True)
    """

    angle_deg: float
    absolute: bool = False

    def __post_init__(self) -> None:
        """Validate the compass angle."""
        if not isinstance(self.angle_deg, (float, int, np.floating, np.integer)):
            raise TypeError(f"angle_deg must be numeric, got {type(self.angle_deg)}")
        if not np.isfinite(self.angle_deg):
            raise ValueError(f"angle_deg must be finite, got {self.angle_deg}")


@dataclass(frozen=True)
class MotionSample:
    """
    Vertical acceleration reading.

    Attributes:
        accel_z: Acceleration along the device z axis. Units: m/s².
                 None when the platform delivered no value for the axis.
        t: Capture time in seconds (monotonic), or None if unknown.

    Notes:
        - A missing or non-finite axis is read as 0.0 by `vertical`; it is
          not an error.
        - Only the z component is consumed by the step detector.
    """

    accel_z: Optional[float]
    t: Optional[float] = None

    @property
    def vertical(self) -> float:
        """Vertical acceleration with malformed readings mapped to 0.0."""
        if self.accel_z is None:
            return 0.0
        try:
            value = float(self.accel_z)
        except (TypeError, ValueError):
            return 0.0
        if not np.isfinite(value):
            return 0.0
        return value

    @classmethod
    def from_vector(
        cls,
        accel: Optional[Sequence[Optional[float]]],
        t: Optional[float] = None,
    ) -> "MotionSample":
        """
        Build a sample from a full acceleration vector [x, y, z].

        Args:
            accel: Acceleration vector (length 3) or None. Individual
                   components may be None.
            t: Capture time in seconds.

        Returns:
            MotionSample keeping only the z component.

        Example:
            >>> MotionSample.from_vector([0.1, -0.2, 10.4], t=1.5).vertical
            10.4
            >>> MotionSample.from_vector(None).vertical
            0.0
        """
        if accel is None or len(accel) < 3:
            return cls(accel_z=None, t=t)
        return cls(accel_z=accel[2], t=t)


@dataclass(frozen=True)
class StepEvent:
    """
    A detected step.

    Attributes:
        t: Time at which the step was accepted (seconds).
        count: Number of steps emitted since the detector was last reset
               (1 for the first step).
    """

    t: float
    count: int
