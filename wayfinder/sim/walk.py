"""
Synthetic walk generation for guidance tests and demos.

Generates a compass stream and a vertical acceleration stream for a
pedestrian who stands still, turns towards a target heading, then walks a
fixed number of steps:

    ψ(t)   = ψ_0 + (ψ_1 − ψ_0) · clip(t / T_lead, 0, 1) + n_ψ(t)
    a_z(t) = g + A · sin(2π f (t − T_lead)) · 1[walking] + n_a(t)

With the default amplitude A = 2.5 m/s² the acceleration swings between
about 7.3 and 12.3 m/s², crossing both step thresholds (9.0 / 11.0) once per
step. The default step frequency (1.25 Hz) keeps steps 0.8 s apart, well above
the 0.6 s debounce even after the 0.1 s motion throttle.

Dataset layout written by save_walk_trace / read by load_walk_trace:
    time.txt, heading.txt, accel_z.txt, step_times.txt, config.json
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np


@dataclass(frozen=True)
class WalkTrace:
    """
    Time-aligned compass and motion samples of a synthetic walk.

    Attributes:
        t: Sample times in seconds. Shape: (N,).
        heading_deg: Raw compass angles in [0, 360). Shape: (N,).
        accel_z: Vertical acceleration in m/s². Shape: (N,).
        step_times: Times of the true acceleration peaks. Shape: (K,).
        meta: Generation parameters.
    """

    t: np.ndarray
    heading_deg: np.ndarray
    accel_z: np.ndarray
    step_times: np.ndarray
    meta: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate array shapes."""
        if self.t.ndim != 1:
            raise ValueError(f"t must be 1D array, got shape {self.t.shape}")
        n = len(self.t)
        if self.heading_deg.shape != (n,):
            raise ValueError(f"heading_deg must have shape ({n},), got {self.heading_deg.shape}")
        if self.accel_z.shape != (n,):
            raise ValueError(f"accel_z must have shape ({n},), got {self.accel_z.shape}")
        if self.step_times.ndim != 1:
            raise ValueError(f"step_times must be 1D array, got shape {self.step_times.shape}")

    def __len__(self) -> int:
        return len(self.t)

    @property
    def n_steps(self) -> int:
        return len(self.step_times)

    @property
    def duration(self) -> float:
        return float(self.t[-1] - self.t[0]) if len(self.t) else 0.0


def generate_walk_trace(
    n_steps: int = 10,
    target_heading_deg: float = 170.0,
    start_heading_deg: Optional[float] = None,
    step_freq: float = 1.25,
    dt: float = 0.05,
    lead_in_s: float = 2.0,
    tail_s: float = 1.0,
    accel_amplitude: float = 2.5,
    accel_noise_std: float = 0.1,
    heading_noise_std: float = 3.0,
    g: float = 9.81,
    seed: Optional[int] = 42,
) -> WalkTrace:
    """
    Generate a synthetic walk.

    Args:
        n_steps: Number of steps walked after the lead-in.
        target_heading_deg: Heading held while walking. Units: degrees.
        start_heading_deg: Heading at t = 0; the user turns linearly to the
                           target during the lead-in. Default: target.
        step_freq: Step frequency. Units: Hz.
        dt: Sample period of both streams. Units: s.
        lead_in_s: Standing time before the first step. Units: s.
        tail_s: Standing time after the last step. Units: s.
        accel_amplitude: Vertical acceleration swing A. Units: m/s².
        accel_noise_std: Acceleration noise σ. Units: m/s².
        heading_noise_std: Compass noise σ. Units: degrees.
        g: Gravity magnitude. Units: m/s².
        seed: RNG seed (None for non-deterministic output).

    Returns:
        WalkTrace.

    Example:
        >>> trace = generate_walk_trace(n_steps=5, target_heading_deg=10.0)
        >>> trace.n_steps
        5
    """
    if n_steps < 0:
        raise ValueError(f"n_steps must be non-negative, got {n_steps}")
    if step_freq <= 0:
        raise ValueError(f"step_freq must be positive, got {step_freq}")
    if dt <= 0:
        raise ValueError(f"dt must be positive, got {dt}")
    if lead_in_s < 0 or tail_s < 0:
        raise ValueError("lead_in_s and tail_s must be non-negative")

    rng = np.random.default_rng(seed)
    if start_heading_deg is None:
        start_heading_deg = target_heading_deg

    walk_s = n_steps / step_freq
    duration = lead_in_s + walk_s + tail_s
    t = np.arange(0.0, duration, dt)

    # Shortest turn from start to target heading
    turn = (target_heading_deg - start_heading_deg + 180.0) % 360.0 - 180.0
    progress = np.clip(t / lead_in_s, 0.0, 1.0) if lead_in_s > 0 else np.ones_like(t)
    heading = start_heading_deg + turn * progress
    heading = heading + heading_noise_std * rng.standard_normal(len(t))
    heading = np.mod(heading, 360.0)

    walking = (t >= lead_in_s) & (t < lead_in_s + walk_s)
    phase = 2.0 * np.pi * step_freq * (t - lead_in_s)
    accel_z = g + accel_amplitude * np.sin(phase) * walking
    accel_z = accel_z + accel_noise_std * rng.standard_normal(len(t))

    step_times = lead_in_s + (np.arange(n_steps) + 0.25) / step_freq

    meta = {
        "n_steps": n_steps,
        "target_heading_deg": target_heading_deg,
        "start_heading_deg": start_heading_deg,
        "step_freq": step_freq,
        "dt": dt,
        "lead_in_s": lead_in_s,
        "tail_s": tail_s,
        "accel_amplitude": accel_amplitude,
        "accel_noise_std": accel_noise_std,
        "heading_noise_std": heading_noise_std,
        "g": g,
        "seed": seed,
    }
    return WalkTrace(t=t, heading_deg=heading, accel_z=accel_z, step_times=step_times, meta=meta)


def save_walk_trace(trace: WalkTrace, output_dir: Union[str, Path]) -> Path:
    """Write a trace as text files plus config.json.

    Returns:
        The output directory.
    """
    path = Path(output_dir)
    path.mkdir(parents=True, exist_ok=True)

    np.savetxt(path / "time.txt", trace.t, fmt="%.6f", header="time (s)")
    np.savetxt(path / "heading.txt", trace.heading_deg, fmt="%.4f", header="compass heading (deg)")
    np.savetxt(path / "accel_z.txt", trace.accel_z, fmt="%.5f", header="vertical acceleration (m/s^2)")
    np.savetxt(path / "step_times.txt", trace.step_times, fmt="%.6f", header="true step peak times (s)")

    with open(path / "config.json", "w") as f:
        json.dump(trace.meta, f, indent=2)

    return path


def load_walk_trace(data_dir: Union[str, Path]) -> WalkTrace:
    """Load a trace written by save_walk_trace.

    Args:
        data_dir: Dataset directory (e.g. 'data/sim/walk_to_kitchen').

    Returns:
        WalkTrace.
    """
    path = Path(data_dir)
    if not path.is_dir():
        raise FileNotFoundError(f"Walk dataset directory not found: {path}")

    meta: Dict[str, Any] = {}
    config_path = path / "config.json"
    if config_path.exists():
        with open(config_path) as f:
            meta = json.load(f)

    return WalkTrace(
        t=np.atleast_1d(np.loadtxt(path / "time.txt")),
        heading_deg=np.atleast_1d(np.loadtxt(path / "heading.txt")),
        accel_z=np.atleast_1d(np.loadtxt(path / "accel_z.txt")),
        step_times=np.atleast_1d(np.loadtxt(path / "step_times.txt", ndmin=1)),
        meta=meta,
    )
