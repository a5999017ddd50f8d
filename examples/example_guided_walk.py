"""
Example: Guided walk from the living room to a destination.

Replays a compass + accelerometer walk through the navigation state machine
and shows what the renderer would receive at every sample.

Can run with:
    - Pre-generated dataset: python example_guided_walk.py --data guided_walk
    - Inline data (default): python example_guided_walk.py

Demonstrates:
    - Blueprint layout (quarter-turn snapped map, unsnapped arrowhead)
    - Circular-mean compass smoothing across the 0/360 wrap
    - Hysteresis step detection with throttle and debounce
    - Step countdown to arrival and release of all sensors afterwards
"""

import argparse
import logging
from pathlib import Path
from typing import Dict, List, Optional

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Polygon

from wayfinder.config import GuidanceConfig
from wayfinder.floorplan import FloorPlan
from wayfinder.guidance import BlueprintLayout, rotation_matrix_2d
from wayfinder.navigation import NavigationStateMachine
from wayfinder.sim import (
    ManualClock,
    RecordingVideoSink,
    ScriptedHeadingSource,
    ScriptedMotionSource,
    WalkTrace,
    generate_walk_trace,
    load_walk_trace,
    replay_trace,
)

ARROWHEAD = np.array([[-12.0, -6.0], [0.0, 0.0], [-12.0, 6.0]])


def run_guided_walk(
    trace: WalkTrace,
    destination: str,
    plan: FloorPlan,
    config: GuidanceConfig,
) -> Dict:
    """Run one full session over a trace.

    Args:
        trace: Walk to replay.
        destination: Destination room name.
        plan: Floor plan.
        config: Policy values.

    Returns:
        Dictionary with per-sample history and the blueprint.
    """
    clock = ManualClock(start=float(trace.t[0]) if len(trace) else 0.0)
    compass = ScriptedHeadingSource(absolute=True)
    accelerometer = ScriptedMotionSource()
    camera = RecordingVideoSink()

    history: Dict[str, List] = {
        "t": [], "heading": [], "turn": [], "aligned": [], "remaining": [], "step_times": [],
    }

    with NavigationStateMachine(plan, compass, accelerometer, camera,
                                config=config, clock=clock) as machine:
        blueprint = machine.select_destination(destination)
        machine.start_guidance()

        def record(k: int, t: float) -> None:
            state = machine.snapshot()
            if history["remaining"] and state.remaining_steps < history["remaining"][-1]:
                history["step_times"].append(t)
            history["t"].append(t)
            history["heading"].append(np.nan if state.heading is None else state.heading)
            if state.instruction is None:
                history["turn"].append(np.nan)
                history["aligned"].append(False)
            else:
                history["turn"].append(state.instruction.turn_angle_deg)
                history["aligned"].append(state.instruction.is_aligned)
            history["remaining"].append(state.remaining_steps)

        replay_trace(trace, compass, accelerometer, clock=clock, on_sample=record)

        arrived = machine.arrived
        if arrived:
            machine.finish_arrival()

    history["arrived"] = arrived
    history["blueprint"] = blueprint
    history["camera_starts"] = camera.start_count
    history["camera_stops"] = camera.stop_count
    history["open_subscriptions"] = compass.subscriber_count + accelerometer.subscriber_count
    return history


def plot_blueprint(ax, blueprint: BlueprintLayout, destination: str) -> None:
    """Draw the rotated floor plan, the path and its arrowhead."""
    width, height = blueprint.canvas_size
    canvas = np.array([[0, 0], [width, 0], [width, height], [0, height]], dtype=float)
    ax.add_patch(Polygon(blueprint.apply(canvas), closed=True, color="#1E293B"))

    for rect in blueprint.rooms:
        x0, y0 = rect.corner
        corners = np.array([
            [x0, y0], [x0 + rect.width, y0],
            [x0 + rect.width, y0 + rect.height], [x0, y0 + rect.height],
        ])
        ax.add_patch(Polygon(
            blueprint.apply(corners), closed=True,
            facecolor=(0.23, 0.51, 0.96, 0.2) if rect.is_destination else "none",
            edgecolor="#3B82F6" if rect.is_destination else "#475569", linewidth=2,
        ))
        cx, cy = blueprint.apply(np.array(rect.center))
        ax.text(cx, cy, rect.name, ha="center", va="center", color="#94A3B8", fontsize=9)

    path = blueprint.apply(np.vstack([blueprint.path_from, blueprint.path_to]))
    ax.plot(path[:, 0], path[:, 1], "--", color="#34D399", linewidth=3)

    # Arrowhead drawn in plan coordinates at the destination, unsnapped angle
    rot = rotation_matrix_2d(blueprint.arrow_angle_deg)[:2, :2]
    head = ARROWHEAD @ rot.T + blueprint.path_to
    ax.add_patch(Polygon(blueprint.apply(head), closed=True, color="#34D399"))

    sx, sy = blueprint.apply(blueprint.path_from)
    ax.plot(sx, sy, "o", color="#10B981", markersize=12)
    ax.text(sx, sy, "You", ha="center", va="center", color="white", fontsize=7, fontweight="bold")

    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)  # screen coordinates: y down
    ax.set_aspect("equal")
    ax.set_title(
        f"Map to {destination}\nrotation {blueprint.rotation_deg:.0f} deg, "
        f"scale {blueprint.scale:.3f}, arrow {blueprint.arrow_angle_deg:.0f} deg"
    )
    ax.axis("off")


def plot_results(trace: WalkTrace, history: Dict, plan: FloorPlan,
                 destination: str, config: GuidanceConfig, figs_dir: Path) -> None:
    """Save the blueprint figure and the sensor-processing figure."""
    fig1, ax = plt.subplots(figsize=(5, 6.5))
    plot_blueprint(ax, history["blueprint"], destination)
    fig1.savefig(figs_dir / "guided_walk_blueprint.svg", bbox_inches="tight")
    print(f"  [OK] Saved: {figs_dir / 'guided_walk_blueprint.svg'}")

    t = np.asarray(history["t"])
    fig2, (ax1, ax2, ax3) = plt.subplots(3, 1, figsize=(12, 10), sharex=True)

    ax1.plot(trace.t, trace.heading_deg, ".", color="0.6", markersize=3, label="Raw compass")
    ax1.plot(t, history["heading"], "b-", linewidth=2, label="Smoothed (circular mean)")
    ax1.axhline(plan.room(destination).target_heading, color="g", linestyle="--",
                label="Target heading")
    ax1.set_ylabel("Heading [deg]", fontsize=12)
    ax1.set_ylim(0, 360)
    ax1.set_title("Guided Walk: Heading Smoothing and Step Detection",
                  fontsize=14, fontweight="bold")
    ax1.legend(fontsize=10)
    ax1.grid(True, alpha=0.3)

    ax2.plot(trace.t, trace.accel_z, "k-", linewidth=1, label="Vertical accel")
    ax2.axhline(config.step_up_threshold, color="r", linestyle="--", label="UP threshold")
    ax2.axhline(config.step_down_threshold, color="b", linestyle="--", label="DOWN threshold")
    for i, ts in enumerate(history["step_times"]):
        ax2.axvline(ts, color="g", alpha=0.5, label="Counted step" if i == 0 else None)
    ax2.set_ylabel("a_z [m/s²]", fontsize=12)
    ax2.legend(fontsize=10)
    ax2.grid(True, alpha=0.3)

    ax3.step(t, history["remaining"], "m-", where="post", linewidth=2, label="Steps remaining")
    ax3b = ax3.twinx()
    ax3b.plot(t, history["turn"], "c-", alpha=0.7, label="Turn angle")
    ax3b.axhspan(-config.alignment_threshold_deg, config.alignment_threshold_deg,
                 color="g", alpha=0.1)
    ax3b.set_ylabel("Turn [deg]", fontsize=12)
    ax3.set_xlabel("Time [s]", fontsize=12)
    ax3.set_ylabel("Steps", fontsize=12)
    ax3.legend(loc="upper right", fontsize=10)
    ax3.grid(True, alpha=0.3)

    plt.tight_layout()
    fig2.savefig(figs_dir / "guided_walk_signals.svg", bbox_inches="tight")
    print(f"  [OK] Saved: {figs_dir / 'guided_walk_signals.svg'}")
    plt.close("all")


def report(trace: WalkTrace, history: Dict, destination: str) -> None:
    print("\n" + "=" * 70)
    print("RESULTS")
    print("=" * 70)
    print(f"  Destination:         {destination}")
    print(f"  True steps:          {trace.n_steps}")
    print(f"  Counted steps:       {len(history['step_times'])}")
    print(f"  Arrived:             {history['arrived']}")
    aligned = np.asarray(history["aligned"], dtype=bool)
    if aligned.size:
        print(f"  Facing target:       {100.0 * aligned.mean():.0f}% of samples")
    print(f"  Camera start/stop:   {history['camera_starts']}/{history['camera_stops']}")
    print(f"  Open subscriptions:  {history['open_subscriptions']}")
    print("=" * 70)


def run(trace: WalkTrace, destination: str, plot: bool = True) -> Dict:
    plan = FloorPlan.default()
    config = GuidanceConfig()

    print(f"Replaying {len(trace)} samples ({trace.duration:.1f} s) towards {destination}...")
    history = run_guided_walk(trace, destination, plan, config)
    report(trace, history, destination)

    if plot:
        figs_dir = Path(__file__).parent / "figs"
        figs_dir.mkdir(exist_ok=True)
        print("\nGenerating plots...")
        plot_results(trace, history, plan, destination, config, figs_dir)
    return history


def main():
    """Main execution with CLI argument parsing."""
    parser = argparse.ArgumentParser(
        description="Guided walk: selection, blueprint, guidance and arrival",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run with inline generated data (default)
  python example_guided_walk.py

  # Run with a pre-generated dataset
  python example_guided_walk.py --data guided_walk

  # Another destination, no plots, verbose state machine logging
  python example_guided_walk.py --destination Bedroom --no-plot -v
        """
    )
    parser.add_argument("--data", type=str, default=None,
                        help="Dataset name or path (e.g. 'guided_walk' or full path)")
    parser.add_argument("--destination", type=str, default=None,
                        help="Destination room (default: from dataset, else Kitchen)")
    parser.add_argument("--no-plot", action="store_true", help="Skip figure generation")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    destination: Optional[str] = args.destination
    if args.data:
        data_path = Path(args.data)
        if not data_path.exists():
            data_path = Path("data/sim") / args.data
        if not data_path.exists():
            print(f"Error: Dataset not found at '{args.data}' or 'data/sim/{args.data}'")
            return
        trace = load_walk_trace(data_path)
        destination = destination or trace.meta.get("destination", "Kitchen")
    else:
        destination = destination or "Kitchen"
        plan = FloorPlan.default()
        trace = generate_walk_trace(
            n_steps=GuidanceConfig().start_steps,
            target_heading_deg=plan.room(destination).target_heading,
            start_heading_deg=plan.start.target_heading,
        )

    run(trace, destination, plot=not args.no_plot)


if __name__ == "__main__":
    main()
