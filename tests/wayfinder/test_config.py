"""
Unit tests for wayfinder/config.py (policy constants).

Run with: pytest tests/wayfinder/test_config.py -v
"""

import dataclasses
import json
import tempfile
import unittest
from pathlib import Path

import pytest

from wayfinder.config import GuidanceConfig


class TestDefaults(unittest.TestCase):

    def test_default_policy(self) -> None:
        config = GuidanceConfig()

        assert config.heading_window == 10
        assert config.step_up_threshold == 11.0
        assert config.step_down_threshold == 9.0
        assert config.step_debounce_s == 0.6
        assert config.motion_throttle_s == 0.1
        assert config.alignment_threshold_deg == 20.0
        assert config.start_steps == 10
        assert config.blueprint_margin == 0.95
        assert (config.canvas_width, config.canvas_height) == (300.0, 400.0)

    def test_frozen(self) -> None:
        config = GuidanceConfig()

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.start_steps = 3


class TestValidation(unittest.TestCase):

    def test_thresholds_ordered(self) -> None:
        with pytest.raises(ValueError, match="step_down_threshold"):
            GuidanceConfig(step_up_threshold=9.0, step_down_threshold=9.0)

    def test_window_positive(self) -> None:
        with pytest.raises(ValueError, match="heading_window"):
            GuidanceConfig(heading_window=0)

    def test_start_steps_non_negative(self) -> None:
        with pytest.raises(ValueError, match="start_steps"):
            GuidanceConfig(start_steps=-1)

    def test_alignment_range(self) -> None:
        with pytest.raises(ValueError, match="alignment_threshold_deg"):
            GuidanceConfig(alignment_threshold_deg=200.0)

    def test_margin_range(self) -> None:
        with pytest.raises(ValueError, match="blueprint_margin"):
            GuidanceConfig(blueprint_margin=0.0)

    def test_canvas_positive(self) -> None:
        with pytest.raises(ValueError, match="canvas"):
            GuidanceConfig(canvas_width=0.0)

    def test_ineffective_debounce_warns(self) -> None:
        with pytest.warns(UserWarning, match="debounce"):
            GuidanceConfig(step_debounce_s=0.05)


class TestLoading(unittest.TestCase):

    def test_from_dict_partial(self) -> None:
        config = GuidanceConfig.from_dict({"start_steps": 25, "heading_window": 5})

        assert config.start_steps == 25
        assert config.heading_window == 5
        assert config.step_debounce_s == 0.6

    def test_from_dict_unknown_key(self) -> None:
        with pytest.raises(ValueError, match="step_lenght"):
            GuidanceConfig.from_dict({"step_lenght": 0.7})

    def test_json_roundtrip(self) -> None:
        config = GuidanceConfig(alignment_threshold_deg=15.0, start_steps=12)

        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "guidance.json"
            path.write_text(json.dumps(config.to_dict()))

            assert GuidanceConfig.from_json(path) == config

    def test_json_must_be_object(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "guidance.json"
            path.write_text("[1, 2, 3]")

            with pytest.raises(ValueError, match="JSON object"):
                GuidanceConfig.from_json(path)


if __name__ == "__main__":
    unittest.main()
