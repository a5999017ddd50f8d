"""
Compass heading smoothing.

Raw compass readings on a phone jitter by several degrees from one event to
the next. The HeadingFilter keeps the most recent readings in a fixed
capacity ring buffer and reports their circular mean.

Why a circular mean:
    Averaging angles arithmetically fails across the 0°/360° discontinuity:
    the arithmetic mean of 359° and 1° is 180°, the exact opposite of the
    true mean (0°). The circular mean averages the unit vectors instead:

        ψ̄ = atan2( (1/N) Σ sin ψ_i , (1/N) Σ cos ψ_i )

    and wraps the result into [0, 360).
"""

from collections import deque
from typing import Iterable, Optional, Tuple, Union

import numpy as np

from wayfinder.config import GuidanceConfig
from wayfinder.sensors.types import HeadingSample
from wayfinder.utils.angles import normalize_heading


def circular_mean_deg(angles_deg: Iterable[float]) -> float:
    """
    Circular mean of compass angles.

    Args:
        angles_deg: Angles in degrees. Must contain at least one value.

    Returns:
        Mean direction in [0, 360).

    Raises:
        ValueError: If angles_deg is empty.

    Example:
        >>> round(circular_mean_deg([80.0, 100.0]), 6)
        90.0
        >>> # 359° and 1° average to 0° (up to rounding, may read 359.999...)
        >>> m = circular_mean_deg([359.0, 1.0])

    Notes:
        If the unit vectors cancel exactly (e.g. 0° and 180°) the mean
        direction is undefined; atan2(0, 0) = 0 so 0.0 is returned.
    """
    angles = np.fromiter(angles_deg, dtype=float)
    if angles.size == 0:
        raise ValueError("circular mean of an empty window is undefined")

    rad = np.deg2rad(angles)
    mean_sin = np.sum(np.sin(rad)) / angles.size
    mean_cos = np.sum(np.cos(rad)) / angles.size

    mean_deg = np.rad2deg(np.arctan2(mean_sin, mean_cos))
    return normalize_heading(mean_deg)


class HeadingFilter:
    """Sliding-window circular mean over the most recent compass samples.

    Usage:
        >>> heading_filter = HeadingFilter()
        >>> heading_filter.update(HeadingSample(359.0))
        359.0
        >>> smoothed = heading_filter.update(HeadingSample(1.0))  # ~0.0, not 180.0

    The buffer is a deque with maxlen, so pushing past capacity evicts the
    oldest sample. reset() must be called each time guidance restarts.
    """

    def __init__(self, config: Optional[GuidanceConfig] = None, window: Optional[int] = None):
        """Initialize the filter.

        Args:
            config: Policy values; `heading_window` sets the capacity.
            window: Explicit capacity overriding the config.
        """
        config = config or GuidanceConfig()
        capacity = config.heading_window if window is None else window
        if capacity < 1:
            raise ValueError(f"window must be at least 1, got {capacity}")

        self._samples = deque(maxlen=capacity)
        self._heading: Optional[float] = None

    @property
    def capacity(self) -> int:
        return self._samples.maxlen

    @property
    def heading(self) -> Optional[float]:
        """Last smoothed heading, or None if no sample arrived since reset."""
        return self._heading

    @property
    def window(self) -> Tuple[float, ...]:
        """Buffered raw angles, oldest first."""
        return tuple(self._samples)

    def __len__(self) -> int:
        return len(self._samples)

    def update(self, sample: Union[HeadingSample, float]) -> float:
        """Push a raw compass sample and return the new smoothed heading.

        Args:
            sample: HeadingSample or bare angle in degrees.

        Returns:
            Smoothed heading in [0, 360).
        """
        angle = sample.angle_deg if isinstance(sample, HeadingSample) else float(sample)
        if not np.isfinite(angle):
            raise ValueError(f"heading sample must be finite, got {angle}")

        self._samples.append(angle)
        if len(self._samples) == 1:
            # Mean of one element is the element itself
            self._heading = normalize_heading(angle)
        else:
            self._heading = circular_mean_deg(self._samples)
        return self._heading

    def reset(self) -> None:
        """Clear the buffer so stale headings never leak into a new session."""
        self._samples.clear()
        self._heading = None
