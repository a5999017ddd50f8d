"""
Simulation helpers: synthetic walks and scripted sensor sources.

Modules:
    walk: Synthetic compass/acceleration traces and their text dataset format
    sources: Scripted capability objects, manual clock and trace replay
"""

from wayfinder.sim.walk import (
    WalkTrace,
    generate_walk_trace,
    load_walk_trace,
    save_walk_trace,
)

from wayfinder.sim.sources import (
    ManualClock,
    RecordingVideoSink,
    ScriptedHeadingSource,
    ScriptedMotionSource,
    replay_trace,
)

__all__ = [
    "WalkTrace",
    "generate_walk_trace",
    "load_walk_trace",
    "save_walk_trace",
    "ManualClock",
    "RecordingVideoSink",
    "ScriptedHeadingSource",
    "ScriptedMotionSource",
    "replay_trace",
]
