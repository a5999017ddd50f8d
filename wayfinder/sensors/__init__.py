"""
Compass and accelerometer processing.

Modules:
    types: Sensor sample packets and step events
    heading: Circular-mean compass smoothing (HeadingFilter)
    pdr: Hysteresis step detection with throttle and debounce (StepDetector)
    sources: Capability interfaces and subscription handles

Design principles:
    - Sample packets are frozen dataclasses
    - Filters are synchronous, non-blocking and O(window) per update
    - Filters own their state exclusively and expose reset()
    - Platform access goes through injected capability objects

Example:
    >>> from wayfinder.sensors import HeadingFilter, StepDetector, MotionSample
    >>> heading_filter = HeadingFilter()
    >>> heading_filter.update(350.0)
    350.0
    >>> detector = StepDetector(clock=lambda: 0.0)
    >>> detector.update(MotionSample(12.5), now=0.15)
    >>> detector.update(MotionSample(8.5), now=0.30)
    StepEvent(t=0.3, count=1)
"""

from wayfinder.sensors.types import (
    HeadingSample,
    MotionSample,
    StepEvent,
    StepPhase,
)

from wayfinder.sensors.heading import (
    HeadingFilter,
    circular_mean_deg,
)

from wayfinder.sensors.pdr import StepDetector

from wayfinder.sensors.sources import (
    CancellationToken,
    HeadingSource,
    MotionSource,
    Subscription,
    VideoSink,
)

__all__ = [
    # Data types
    "HeadingSample",
    "MotionSample",
    "StepEvent",
    "StepPhase",
    # Filters
    "HeadingFilter",
    "circular_mean_deg",
    "StepDetector",
    # Capabilities
    "CancellationToken",
    "HeadingSource",
    "MotionSource",
    "Subscription",
    "VideoSink",
]
