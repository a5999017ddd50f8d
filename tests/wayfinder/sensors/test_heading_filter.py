"""
Unit tests for wayfinder/sensors/heading.py (compass smoothing).

Tests cover:
    - Circular mean across the 0/360 discontinuity
    - Ring buffer capacity and eviction
    - Reset between guidance sessions
    - Agreement with scipy.stats.circmean
    - Validation of empty windows and non-finite samples

Run with: pytest tests/wayfinder/sensors/test_heading_filter.py -v
"""

import unittest

import numpy as np
import pytest
from scipy.stats import circmean

from wayfinder.config import GuidanceConfig
from wayfinder.sensors.heading import HeadingFilter, circular_mean_deg
from wayfinder.sensors.types import HeadingSample


def circular_distance(a: float, b: float) -> float:
    d = abs(a - b) % 360.0
    return min(d, 360.0 - d)


class TestCircularMean(unittest.TestCase):
    """Test suite for circular_mean_deg."""

    def test_wraparound_pair(self) -> None:
        """359° and 1° average to north, not south."""
        mean = circular_mean_deg([359.0, 1.0])

        assert 0.0 <= mean < 360.0
        assert circular_distance(mean, 0.0) < 1e-9

    def test_simple_average(self) -> None:
        assert np.isclose(circular_mean_deg([80.0, 100.0]), 90.0)

    def test_result_in_range(self) -> None:
        """Means of westward angles come back positive."""
        mean = circular_mean_deg([260.0, 280.0])

        assert np.isclose(mean, 270.0)

    def test_matches_scipy_circmean(self) -> None:
        """Agrees with scipy for noisy windows around several directions."""
        rng = np.random.default_rng(7)
        for center in [0.0, 45.0, 170.0, 350.0]:
            angles = np.mod(center + 15.0 * rng.standard_normal(10), 360.0)
            expected = np.rad2deg(circmean(np.deg2rad(angles)))

            assert circular_distance(circular_mean_deg(angles), expected) < 1e-9

    def test_empty_raises(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            circular_mean_deg([])


class TestHeadingFilter(unittest.TestCase):
    """Test suite for the sliding-window HeadingFilter."""

    def test_no_heading_before_first_sample(self) -> None:
        heading_filter = HeadingFilter()

        assert heading_filter.heading is None
        assert len(heading_filter) == 0

    def test_single_sample_returned_exactly(self) -> None:
        heading_filter = HeadingFilter()

        assert heading_filter.update(HeadingSample(359.0)) == 359.0
        assert heading_filter.heading == 359.0

    def test_single_sample_is_normalized(self) -> None:
        """Out-of-range readings are wrapped into [0, 360)."""
        heading_filter = HeadingFilter()

        assert heading_filter.update(370.0) == 10.0
        heading_filter.reset()
        assert heading_filter.update(-90.0) == 270.0

    def test_wraparound_smoothing(self) -> None:
        """A compass flickering around north stays near north."""
        heading_filter = HeadingFilter()
        for angle in [358.0, 2.0, 359.0, 1.0, 0.0]:
            smoothed = heading_filter.update(angle)

        assert 0.0 <= smoothed < 360.0
        assert circular_distance(smoothed, 0.0) < 1.0

    def test_capacity_from_config(self) -> None:
        heading_filter = HeadingFilter(GuidanceConfig(heading_window=4))

        assert heading_filter.capacity == 4

    def test_explicit_window_overrides_config(self) -> None:
        heading_filter = HeadingFilter(GuidanceConfig(heading_window=4), window=2)

        assert heading_filter.capacity == 2

    def test_oldest_sample_evicted(self) -> None:
        """Pushing past capacity drops the oldest reading."""
        heading_filter = HeadingFilter(window=3)
        for angle in [10.0, 20.0, 30.0, 40.0]:
            smoothed = heading_filter.update(angle)

        assert heading_filter.window == (20.0, 30.0, 40.0)
        assert len(heading_filter) == 3
        assert np.isclose(smoothed, 30.0)

    def test_output_depends_on_last_ten_only(self) -> None:
        """Once the first reading is evicted it no longer pulls the mean."""
        heading_filter = HeadingFilter()
        heading_filter.update(90.0)
        for _ in range(9):
            with_first = heading_filter.update(0.0)

        without_first = heading_filter.update(0.0)

        assert circular_distance(with_first, 0.0) > 1.0
        assert circular_distance(without_first, 0.0) < 1e-9

    def test_default_window_holds_ten(self) -> None:
        heading_filter = HeadingFilter()
        for k in range(25):
            heading_filter.update(float(k))

        assert len(heading_filter) == 10
        assert heading_filter.window[0] == 15.0

    def test_reset_clears_history(self) -> None:
        """After reset the first sample is reported on its own."""
        heading_filter = HeadingFilter()
        for _ in range(5):
            heading_filter.update(90.0)

        heading_filter.reset()

        assert heading_filter.heading is None
        assert len(heading_filter) == 0
        assert heading_filter.update(200.0) == 200.0

    def test_non_finite_sample_rejected(self) -> None:
        heading_filter = HeadingFilter()

        with pytest.raises(ValueError, match="finite"):
            heading_filter.update(float("nan"))
        assert len(heading_filter) == 0

    def test_invalid_window(self) -> None:
        with pytest.raises(ValueError, match="window"):
            HeadingFilter(window=0)


if __name__ == "__main__":
    unittest.main()
