"""
Blueprint (floor plan) geometry for the route overview.

Given the start room and the destination, compute how the floor plan canvas
should be rotated and scaled so the route is shown in a tidy orientation,
plus the path endpoints and the arrowhead angle. Pure functions, no state.

Algorithm:
    1. Raw bearing of the path in plan coordinates:
           β_raw = atan2(Δy, Δx)
       converted to the map's screen-up convention:
           β = −90° − β_raw
    2. Snap β to the nearest multiple of 90° (β_s). The map only rotates in
       quarter turns so room rectangles stay axis-aligned.
    3. Bounding box of the W × H canvas rotated by β_s:
           W' = W|cos β_s| + H|sin β_s|
           H' = W|sin β_s| + H|cos β_s|
       and uniform scale s = 0.95 · min(W/W', H/H') so the rotated content
       still fits with a 5% margin.
    4. One composed transform about the canvas centre c:
           M = T(c) · R(−β_s) · S(s) · T(−c)
    5. The arrowhead at the destination uses the unsnapped β_raw.

Rotation convention:
    Screen coordinates are y-down, so R(α) with positive α turns content
    clockwise on screen, exactly as SVG's rotate(α):
           R(α) = [[cos α, −sin α, 0],
                   [sin α,  cos α, 0],
                   [    0,      0, 1]]
"""

import warnings
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import numpy as np

from wayfinder.config import GuidanceConfig
from wayfinder.floorplan import Room
from wayfinder.utils.angles import snap_angle_deg


@dataclass(frozen=True)
class RoomRect:
    """Axis-aligned room rectangle in plan coordinates."""

    name: str
    center: Tuple[float, float]
    width: float
    height: float
    is_destination: bool = False

    @property
    def corner(self) -> Tuple[float, float]:
        """Top-left corner (minimum x, minimum y)."""
        return (self.center[0] - self.width / 2.0, self.center[1] - self.height / 2.0)


@dataclass(frozen=True)
class BlueprintLayout:
    """Everything the renderer needs to draw the route overview.

    Attributes:
        transform: 3x3 homogeneous matrix mapping plan to screen coordinates.
        svg_transform: Same transform as an SVG transform attribute.
        rotation_deg: Snapped map rotation β_s (a multiple of the snap step).
        scale: Uniform scale factor including the margin.
        path_bearing_deg: Unsnapped path bearing β in the screen-up convention.
        arrow_angle_deg: Unsnapped raw bearing β_raw for the arrowhead.
        label_rotation_deg: Rotation applied to text labels about their own
                            anchor so they read upright after the map rotation.
        path_from: Start point [x, y] in plan coordinates.
        path_to: Destination point [x, y] in plan coordinates.
        rooms: Room rectangles, destination flagged.
        canvas_size: (width, height) of the canvas.
    """

    transform: np.ndarray
    svg_transform: str
    rotation_deg: float
    scale: float
    path_bearing_deg: float
    arrow_angle_deg: float
    label_rotation_deg: float
    path_from: np.ndarray
    path_to: np.ndarray
    rooms: Tuple[RoomRect, ...]
    canvas_size: Tuple[float, float]

    def apply(self, points: np.ndarray) -> np.ndarray:
        """Map plan points to screen coordinates.

        Args:
            points: Single point (2,) or array of points (N, 2).

        Returns:
            Transformed points with the same shape.
        """
        points = np.asarray(points, dtype=float)
        single = points.ndim == 1
        pts = np.atleast_2d(points)
        if pts.shape[1] != 2:
            raise ValueError(f"points must have shape (2,) or (N, 2), got {points.shape}")

        homogeneous = np.column_stack([pts, np.ones(len(pts))])
        mapped = (self.transform @ homogeneous.T).T[:, :2]
        return mapped[0] if single else mapped


def rotation_matrix_2d(angle_deg: float) -> np.ndarray:
    """Homogeneous rotation R(α) in y-down screen coordinates."""
    a = np.deg2rad(angle_deg)
    c, s = np.cos(a), np.sin(a)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]], dtype=np.float64)


def translation_matrix_2d(tx: float, ty: float) -> np.ndarray:
    return np.array([[1.0, 0.0, tx], [0.0, 1.0, ty], [0.0, 0.0, 1.0]], dtype=np.float64)


def scale_matrix_2d(scale: float) -> np.ndarray:
    return np.diag([scale, scale, 1.0]).astype(np.float64)


def fit_scale(width: float, height: float, rotation_deg: float, margin: float = 0.95) -> float:
    """
    Uniform scale that keeps a rotated W x H canvas inside the unrotated one.

    Args:
        width: Canvas width W.
        height: Canvas height H.
        rotation_deg: Rotation applied to the canvas.
        margin: Extra shrink factor in (0, 1].

    Returns:
        margin * min(W / W', H / H'), with W', H' the rotated bounding box.

    Example:
        >>> fit_scale(300, 400, 0.0)
        0.95
        >>> round(fit_scale(300, 400, 90.0), 4)  # 0.75 * 0.95
        0.7125
    """
    theta = np.deg2rad(rotation_deg)
    abs_cos = abs(np.cos(theta))
    abs_sin = abs(np.sin(theta))

    new_width = width * abs_cos + height * abs_sin
    new_height = width * abs_sin + height * abs_cos

    scale = min(width / new_width, height / new_height)
    return float(scale * margin)


def _svg_number(value: float) -> str:
    # Avoid "-0" in the emitted attribute
    return f"{float(value) + 0.0:g}"


def layout(
    rooms: Iterable[Room],
    start: Room,
    destination: Room,
    config: Optional[GuidanceConfig] = None,
) -> BlueprintLayout:
    """
    Compute the blueprint transform and path geometry for a route.

    Args:
        rooms: All rooms of the floor plan (a FloorPlan works too).
        start: Starting room.
        destination: Destination room.
        config: Canvas size, margin, snap step and room rectangle size.

    Returns:
        BlueprintLayout.

    Example:
        >>> plan = FloorPlan.default()
        >>> bp = layout(plan, plan.start, plan.room("Kitchen"))
        >>> bp.rotation_deg, bp.arrow_angle_deg
        (-180.0, 90.0)

    Notes:
        - The map uses the snapped bearing while the arrowhead uses the
          unsnapped one, so the arrow points along the true path even when
          the map is only rotated by a quarter turn.
        - A destination equal to the start has no defined bearing;
          atan2(0, 0) = 0 is used and a RuntimeWarning is issued.
    """
    config = config or GuidanceConfig()

    dx = destination.x - start.x
    dy = destination.y - start.y
    if dx == 0 and dy == 0:
        warnings.warn(
            f"Destination {destination.name!r} coincides with the start; "
            f"the path bearing is undefined.",
            RuntimeWarning
        )

    # Step 1: raw bearing and screen-up bearing
    raw_deg = float(np.rad2deg(np.arctan2(dy, dx)))
    path_bearing = -90.0 - raw_deg

    # Step 2: quarter-turn snapping
    snapped = snap_angle_deg(path_bearing, config.snap_step_deg)

    # Step 3: fit the rotated canvas
    width, height = config.canvas_width, config.canvas_height
    scale = fit_scale(width, height, snapped, config.blueprint_margin)

    # Step 4: T(c) R(-snapped) S(scale) T(-c)
    cx, cy = width / 2.0, height / 2.0
    transform = (
        translation_matrix_2d(cx, cy)
        @ rotation_matrix_2d(-snapped)
        @ scale_matrix_2d(scale)
        @ translation_matrix_2d(-cx, -cy)
    )
    svg_transform = (
        f"translate({_svg_number(cx)} {_svg_number(cy)}) "
        f"rotate({_svg_number(-snapped)}) "
        f"scale({_svg_number(scale)}) "
        f"translate({_svg_number(-cx)} {_svg_number(-cy)})"
    )

    rects = tuple(
        RoomRect(
            name=room.name,
            center=(room.x, room.y),
            width=config.room_width,
            height=config.room_height,
            is_destination=room.name == destination.name,
        )
        for room in rooms
    )

    return BlueprintLayout(
        transform=transform,
        svg_transform=svg_transform,
        rotation_deg=snapped,
        scale=scale,
        path_bearing_deg=path_bearing,
        arrow_angle_deg=raw_deg,
        label_rotation_deg=snapped,
        path_from=start.position,
        path_to=destination.position,
        rooms=rects,
        canvas_size=(width, height),
    )
