"""
Scripted sensor sources and a manual clock.

Deterministic stand-ins for the platform capabilities, used by the tests and
the demo script. Samples are pushed explicitly (push) or replayed from a
WalkTrace (replay_trace); subscriptions and camera streams are counted so
tests can assert that everything acquired was released.
"""

import logging
from typing import Callable, List, Optional, Union

from wayfinder.errors import SensorError
from wayfinder.sensors.sources import (
    HeadingSource,
    MotionSource,
    Subscription,
    VideoSink,
)
from wayfinder.sensors.types import HeadingSample, MotionSample
from wayfinder.sim.walk import WalkTrace

logger = logging.getLogger(__name__)


class ManualClock:
    """Clock advanced by hand. Callable like time.monotonic."""

    def __init__(self, start: float = 0.0):
        self.now = float(start)

    def __call__(self) -> float:
        return self.now

    def advance(self, dt: float) -> float:
        if dt < 0:
            raise ValueError(f"dt must be non-negative, got {dt}")
        self.now += dt
        return self.now

    def set(self, t: float) -> None:
        self.now = float(t)


class _PushStream:
    """Subscriber bookkeeping shared by the scripted sources."""

    def __init__(self, name: str, permission_error: Optional[SensorError] = None):
        self.name = name
        self.permission_error = permission_error
        self._callbacks: List[Callable] = []
        self.subscribe_count = 0
        self.unsubscribe_count = 0

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)

    def request_permission(self) -> None:
        if self.permission_error is not None:
            raise self.permission_error

    def subscribe(self, callback: Callable) -> Subscription:
        self._callbacks.append(callback)
        self.subscribe_count += 1

        def release() -> None:
            self._callbacks.remove(callback)
            self.unsubscribe_count += 1

        return Subscription(release, name=f"{self.name} subscription")

    def _deliver(self, sample) -> int:
        # Copy so a callback may unsubscribe while iterating
        callbacks = list(self._callbacks)
        for callback in callbacks:
            callback(sample)
        return len(callbacks)


class ScriptedHeadingSource(_PushStream, HeadingSource):
    """Compass source driven by push()."""

    def __init__(self, absolute: bool = False, permission_error: Optional[SensorError] = None):
        super().__init__("compass", permission_error)
        self._absolute = absolute

    @property
    def absolute(self) -> bool:
        return self._absolute

    def push(self, sample: Union[HeadingSample, float, None]) -> int:
        """Deliver one reading. A float is wrapped in a HeadingSample.

        Returns:
            Number of subscribers that received it.
        """
        if sample is not None and not isinstance(sample, HeadingSample):
            sample = HeadingSample(float(sample), absolute=self._absolute)
        return self._deliver(sample)


class ScriptedMotionSource(_PushStream, MotionSource):
    """Accelerometer source driven by push()."""

    def __init__(self, permission_error: Optional[SensorError] = None):
        super().__init__("accelerometer", permission_error)

    def push(self, sample: Union[MotionSample, float, None], t: Optional[float] = None) -> int:
        """Deliver one reading. A float is taken as the z acceleration."""
        if sample is not None and not isinstance(sample, MotionSample):
            sample = MotionSample(accel_z=float(sample), t=t)
        return self._deliver(sample)


class RecordingVideoSink(VideoSink):
    """Camera passthrough that only records start/stop calls.

    Args:
        start_error: Raised by start() instead of opening a stream.
    """

    def __init__(self, start_error: Optional[SensorError] = None):
        self.start_error = start_error
        self.start_count = 0
        self.stop_count = 0

    @property
    def active(self) -> bool:
        return self.start_count > self.stop_count

    def start(self) -> Subscription:
        if self.start_error is not None:
            raise self.start_error
        self.start_count += 1
        logger.debug("Camera stream started")
        return Subscription(self._stop, name="camera stream")

    def _stop(self) -> None:
        self.stop_count += 1
        logger.debug("Camera stream stopped")


def replay_trace(
    trace: WalkTrace,
    heading_source: ScriptedHeadingSource,
    motion_source: ScriptedMotionSource,
    clock: Optional[ManualClock] = None,
    on_sample: Optional[Callable[[int, float], None]] = None,
) -> int:
    """
    Push every sample of a trace through the scripted sources, in time order.

    For each index k the clock is set to t[k], then the compass sample and
    the motion sample are delivered.

    Args:
        trace: Walk to replay.
        heading_source: Receives trace.heading_deg.
        motion_source: Receives trace.accel_z.
        clock: Clock to move along with the trace.
        on_sample: Called after each index with (k, t[k]).

    Returns:
        Number of time steps replayed.
    """
    for k, t in enumerate(trace.t):
        t = float(t)
        if clock is not None:
            clock.set(t)
        heading_source.push(float(trace.heading_deg[k]))
        motion_source.push(float(trace.accel_z[k]), t=t)
        if on_sample is not None:
            on_sample(k, t)
    return len(trace)
