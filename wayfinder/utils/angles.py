"""
Angle wrapping and manipulation utilities (degrees).

Compass samples, room target headings and turn instructions are all expressed
in degrees, so these helpers work in degrees rather than radians.

Conventions:
    - Compass heading: [0, 360), 0 = North, increasing clockwise
    - Turn angle: (-180, 180], positive = turn right (clockwise)

Critical for:
- Smoothed compass headings (must stay inside [0, 360))
- Turn instructions near the 0°/360° discontinuity
- Quarter-turn snapping of the blueprint rotation
"""

import numpy as np
from typing import Union


def normalize_heading(angle_deg: float) -> float:
    """
    Normalize a compass angle into [0, 360).

    Args:
        angle_deg: Angle in degrees (any finite value).

    Returns:
        Equivalent angle in [0, 360).

    Example:
        >>> normalize_heading(-10.0)
        350.0
        >>> normalize_heading(720.0)
        0.0

    Notes:
        A tiny negative input such as -1e-15 would round to exactly 360.0
        after adding 360; that case is folded back to 0.0 so the result
        never leaves the half-open interval.
    """
    heading = float(np.fmod(angle_deg, 360.0))
    if heading < 0.0:
        heading += 360.0
    if heading >= 360.0:
        heading -= 360.0
    return heading


def wrap_angle_deg(angle_deg: float) -> float:
    """
    Wrap an angle into the half-open turn range (-180, 180].

    Args:
        angle_deg: Angle in degrees.

    Returns:
        Wrapped angle in (-180, 180]. Exactly -180 maps to +180.

    Example:
        >>> wrap_angle_deg(-340.0)
        20.0
        >>> wrap_angle_deg(-180.0)
        180.0
    """
    wrapped = 180.0 - normalize_heading(180.0 - angle_deg)
    return wrapped


def angle_diff_deg(target_deg: Union[float, np.ndarray],
                   current_deg: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Compute the signed turn from current_deg to target_deg.

    Returns target - current wrapped to (-180, 180]. Positive values mean
    "rotate clockwise" (turn right) from the current facing.

    Args:
        target_deg: Target heading in degrees.
        current_deg: Current heading in degrees.

    Returns:
        Signed difference in (-180, 180].

    Example:
        >>> angle_diff_deg(10.0, 350.0)
        20.0
        >>> angle_diff_deg(350.0, 10.0)
        -20.0

    Notes:
        Without wrapping, a target of 10° seen from 350° would read as a
        340° left turn instead of a 20° right turn.
    """
    if isinstance(target_deg, np.ndarray) or isinstance(current_deg, np.ndarray):
        diff = np.asarray(target_deg, dtype=float) - np.asarray(current_deg, dtype=float)
        return 180.0 - np.mod(180.0 - diff, 360.0)
    return wrap_angle_deg(target_deg - current_deg)


def snap_angle_deg(angle_deg: float, step_deg: float = 90.0) -> float:
    """
    Snap an angle to the nearest multiple of step_deg.

    Halfway cases round up (towards +inf), so 45° snaps to 90° and -45°
    snaps to 0°.

    Args:
        angle_deg: Angle in degrees.
        step_deg: Snapping step in degrees. Must be positive.

    Returns:
        Snapped angle (not wrapped; -180 stays -180).

    Example:
        >>> snap_angle_deg(-135.0)
        -90.0
        >>> snap_angle_deg(30.0)
        0.0
    """
    if step_deg <= 0:
        raise ValueError(f"step_deg must be positive, got {step_deg}")
    return float(step_deg * np.floor(angle_deg / step_deg + 0.5))
