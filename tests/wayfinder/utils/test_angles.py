"""
Unit tests for wayfinder/utils/angles.py (degree angle helpers).

Run with: pytest tests/wayfinder/utils/test_angles.py -v
"""

import unittest

import numpy as np
import pytest

from wayfinder.utils.angles import (
    angle_diff_deg,
    normalize_heading,
    snap_angle_deg,
    wrap_angle_deg,
)


class TestNormalizeHeading(unittest.TestCase):

    def test_values(self) -> None:
        assert normalize_heading(-10.0) == 350.0
        assert normalize_heading(720.0) == 0.0
        assert normalize_heading(359.5) == 359.5
        assert normalize_heading(-370.0) == 350.0

    def test_tiny_negative_stays_half_open(self) -> None:
        heading = normalize_heading(-1e-15)

        assert 0.0 <= heading < 360.0

    def test_range_sweep(self) -> None:
        for angle in np.linspace(-1000.0, 1000.0, 401):
            assert 0.0 <= normalize_heading(angle) < 360.0


class TestWrapAngle(unittest.TestCase):

    def test_values(self) -> None:
        assert wrap_angle_deg(-340.0) == 20.0
        assert wrap_angle_deg(190.0) == -170.0
        assert wrap_angle_deg(0.0) == 0.0

    def test_half_turn_boundary(self) -> None:
        """-180 maps to +180; +180 stays."""
        assert wrap_angle_deg(-180.0) == 180.0
        assert wrap_angle_deg(180.0) == 180.0
        assert wrap_angle_deg(540.0) == 180.0


class TestAngleDiff(unittest.TestCase):

    def test_scalar(self) -> None:
        assert angle_diff_deg(10.0, 350.0) == 20.0
        assert angle_diff_deg(350.0, 10.0) == -20.0

    def test_array(self) -> None:
        target = np.array([10.0, 350.0, 190.0])
        current = np.array([350.0, 10.0, 10.0])

        diff = angle_diff_deg(target, current)

        assert np.allclose(diff, [20.0, -20.0, 180.0])


class TestSnapAngle(unittest.TestCase):

    def test_nearest_quarter(self) -> None:
        assert snap_angle_deg(30.0) == 0.0
        assert snap_angle_deg(-135.0) == -90.0
        assert snap_angle_deg(-147.8) == -180.0
        assert snap_angle_deg(100.0) == 90.0

    def test_half_rounds_up(self) -> None:
        assert snap_angle_deg(45.0) == 90.0
        assert snap_angle_deg(-45.0) == 0.0

    def test_not_wrapped(self) -> None:
        assert snap_angle_deg(-180.0) == -180.0
        assert snap_angle_deg(-260.0) == -270.0

    def test_custom_step(self) -> None:
        assert snap_angle_deg(50.0, step_deg=45.0) == 45.0

    def test_invalid_step(self) -> None:
        with pytest.raises(ValueError, match="step_deg"):
            snap_angle_deg(10.0, step_deg=0.0)


if __name__ == "__main__":
    unittest.main()
