"""
Streaming step detection for pedestrian dead reckoning.

Steps are detected from the vertical acceleration stream with a two-state
hysteresis machine:

    DOWN --(a_z > UP threshold)--> UP --(a_z < DOWN threshold)--> DOWN (+step)

A step's acceleration signature is a rise above gravity followed by a fall
below it. Requiring the full UP -> DOWN cycle, with two distinct thresholds,
prevents chatter around a single crossing value; requiring a minimum
interval between counted steps (debounce) rejects the double counts caused
by the vibration of a single footfall.

Two timing rules apply, in this order:
    1. Throttle: a sample arriving less than `motion_throttle_s` after the
       previously accepted sample is ignored outright.
    2. Debounce: an UP -> DOWN transition less than `step_debounce_s` after
       the last counted step still changes the phase but emits no event.

Default thresholds (11.0 / 9.0 m/s²) bracket standard gravity (9.81 m/s²),
so a phone held still (a_z ≈ g) sits inside the hysteresis band.
"""

import time
from typing import Callable, Optional

from wayfinder.config import GuidanceConfig
from wayfinder.sensors.types import MotionSample, StepEvent, StepPhase

# Float seconds: 0.6 - 0.5 is 0.0999..., so interval checks allow this much slack
TIME_TOLERANCE_S = 1e-9


class StepDetector:
    """Two-threshold hysteresis step detector with throttle and debounce.

    Usage:
        >>> detector = StepDetector(clock=lambda: 0.0)
        >>> detector.update(MotionSample(12.0), now=0.2)   # DOWN -> UP
        >>> detector.update(MotionSample(8.0), now=0.4)    # UP -> DOWN, step
        StepEvent(t=0.4, count=1)
    """

    def __init__(
        self,
        config: Optional[GuidanceConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the detector.

        Args:
            config: Policy values (thresholds, debounce, throttle).
            clock: Time source in seconds. Read once here to stamp the
                   construction time used by the first throttle check.
        """
        self.config = config or GuidanceConfig()
        self._clock = clock

        self.phase = StepPhase.DOWN
        self.last_step_time: Optional[float] = None
        self.last_sample_time: float = clock()
        self.step_count = 0

    def update(self, sample: MotionSample, now: Optional[float] = None) -> Optional[StepEvent]:
        """Process one motion sample.

        Args:
            sample: Vertical acceleration sample.
            now: Arrival time in seconds. Defaults to sample.t.

        Returns:
            StepEvent if this sample completed a counted step, else None.

        Raises:
            ValueError: If neither now nor sample.t is available.
        """
        if now is None:
            now = sample.t
        if now is None:
            raise ValueError("StepDetector.update needs a timestamp (now or sample.t)")

        # Throttle before anything else
        if now - self.last_sample_time < self.config.motion_throttle_s - TIME_TOLERANCE_S:
            return None
        self.last_sample_time = now

        accel_z = sample.vertical

        if self.phase is StepPhase.DOWN:
            if accel_z > self.config.step_up_threshold:
                self.phase = StepPhase.UP
            return None

        if accel_z < self.config.step_down_threshold:
            self.phase = StepPhase.DOWN
            if (self.last_step_time is None
                    or now - self.last_step_time >= self.config.step_debounce_s - TIME_TOLERANCE_S):
                self.last_step_time = now
                self.step_count += 1
                return StepEvent(t=now, count=self.step_count)

        return None

    def reset(self) -> None:
        """Return to the DOWN phase and forget the last counted step."""
        self.phase = StepPhase.DOWN
        self.last_step_time = None
        self.step_count = 0
