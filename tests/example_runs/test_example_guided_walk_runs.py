"""Smoke tests for the guided-walk example script.

Verifies that the example runs end to end (inline data and saved dataset)
and that the figures can be produced headless.
Uses Agg backend to avoid display requirements.
"""

import os
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

from examples.example_guided_walk import plot_results, run_guided_walk
from wayfinder.config import GuidanceConfig
from wayfinder.floorplan import FloorPlan
from wayfinder.sim import generate_walk_trace, save_walk_trace


class TestRunGuidedWalk(unittest.TestCase):
    """Direct calls into the example helpers."""

    def setUp(self):
        self.plan = FloorPlan.default()
        self.config = GuidanceConfig()
        self.trace = generate_walk_trace(
            n_steps=10, target_heading_deg=190.0, start_heading_deg=350.0
        )

    def test_history_and_release(self):
        history = run_guided_walk(self.trace, "Bathroom", self.plan, self.config)

        assert history["arrived"]
        assert len(history["step_times"]) == 10
        assert history["remaining"][-1] == 0
        assert len(history["t"]) == len(self.trace)
        assert history["camera_starts"] == history["camera_stops"] == 1
        assert history["open_subscriptions"] == 0

    def test_plots_written(self):
        history = run_guided_walk(self.trace, "Bathroom", self.plan, self.config)

        with tempfile.TemporaryDirectory() as tmpdir:
            figs_dir = Path(tmpdir)
            plot_results(self.trace, history, self.plan, "Bathroom", self.config, figs_dir)

            assert (figs_dir / "guided_walk_blueprint.svg").exists()
            assert (figs_dir / "guided_walk_signals.svg").exists()


class TestExampleGuidedWalkRuns(unittest.TestCase):
    """Run the script as a module, the way a user would."""

    def setUp(self):
        self.python_exe = sys.executable
        self.workspace_root = Path(__file__).parent.parent.parent
        self.env = dict(os.environ, MPLBACKEND="Agg")

    def run_example(self, *args):
        return subprocess.run(
            [self.python_exe, "-m", "examples.example_guided_walk", "--no-plot", *args],
            cwd=self.workspace_root,
            env=self.env,
            capture_output=True,
            text=True,
            timeout=120,
        )

    def test_inline_mode(self):
        result = self.run_example()

        self.assertEqual(result.returncode, 0, msg=result.stderr)
        self.assertIn("Arrived:             True", result.stdout)
        self.assertIn("Open subscriptions:  0", result.stdout)

    def test_dataset_mode(self):
        trace = generate_walk_trace(n_steps=10, target_heading_deg=10.0)
        trace.meta["destination"] = "Bedroom"

        with tempfile.TemporaryDirectory() as tmpdir:
            path = save_walk_trace(trace, Path(tmpdir) / "walk_to_bedroom")
            result = self.run_example("--data", str(path))

        self.assertEqual(result.returncode, 0, msg=result.stderr)
        self.assertIn("Destination:         Bedroom", result.stdout)
        self.assertIn("Arrived:             True", result.stdout)


if __name__ == "__main__":
    unittest.main()
