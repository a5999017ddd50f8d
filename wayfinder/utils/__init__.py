"""
Utility functions for guidance algorithms.

This module provides the angle operations shared across the codebase
(compass wrapping, signed differences and quarter-turn snapping).
"""

from .angles import (
    normalize_heading,
    wrap_angle_deg,
    angle_diff_deg,
    snap_angle_deg,
)

__all__ = [
    'normalize_heading',
    'wrap_angle_deg',
    'angle_diff_deg',
    'snap_angle_deg',
]
