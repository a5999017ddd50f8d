"""
End-to-end guided walks through the navigation state machine.

A synthetic compass + accelerometer walk is replayed through scripted
sources; the session must count the steps, arrive, and release every
sensor and the camera when the arrival is confirmed.

Run with: pytest tests/test_guided_walk_integration.py -v
"""

import unittest

from wayfinder.floorplan import FloorPlan
from wayfinder.navigation import NavigationStateMachine, NavMode
from wayfinder.sim import (
    ManualClock,
    RecordingVideoSink,
    ScriptedHeadingSource,
    ScriptedMotionSource,
    generate_walk_trace,
    replay_trace,
)
from wayfinder.utils.angles import angle_diff_deg


class TestGuidedWalk(unittest.TestCase):

    def setUp(self) -> None:
        self.plan = FloorPlan.default()
        self.clock = ManualClock()
        self.compass = ScriptedHeadingSource(absolute=True)
        self.motion = ScriptedMotionSource()
        self.camera = RecordingVideoSink()
        self.machine = NavigationStateMachine(
            self.plan, self.compass, self.motion, self.camera, clock=self.clock
        )

    def walk(self, destination: str, n_steps: int, **kwargs):
        target = self.plan.room(destination)
        trace = generate_walk_trace(
            n_steps=n_steps,
            target_heading_deg=target.target_heading,
            start_heading_deg=self.plan.start.target_heading,
            **kwargs,
        )
        self.machine.select_destination(destination)
        self.machine.start_guidance()
        replay_trace(trace, self.compass, self.motion, clock=self.clock)
        return trace

    def test_walk_to_kitchen_arrives(self) -> None:
        self.walk("Kitchen", n_steps=10)

        state = self.machine.snapshot()
        assert state.arrived
        assert state.remaining_steps == 0
        assert state.instruction is None
        assert abs(angle_diff_deg(170.0, state.heading)) < 5.0

        self.machine.finish_arrival()

        assert self.machine.mode is NavMode.SELECTION
        assert self.camera.start_count == self.camera.stop_count == 1
        assert self.compass.subscriber_count == 0
        assert self.motion.subscriber_count == 0

    def test_short_walk_does_not_arrive(self) -> None:
        self.walk("Bedroom", n_steps=9)

        state = self.machine.snapshot()
        assert not state.arrived
        assert state.remaining_steps == 1
        # Facing the bedroom heading across north
        assert state.instruction.is_aligned

    def test_overshoot_stays_at_zero(self) -> None:
        self.walk("Bathroom", n_steps=13)

        assert self.machine.remaining_steps == 0
        assert self.machine.arrived

    def test_fast_cadence_loses_steps_to_debounce(self) -> None:
        """At 2 Hz every other step falls inside the 0.6 s debounce."""
        self.walk("Kitchen", n_steps=10, step_freq=2.0)

        assert self.machine.remaining_steps > 0
        assert not self.machine.arrived


if __name__ == "__main__":
    unittest.main()
