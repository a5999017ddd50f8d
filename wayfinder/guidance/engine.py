"""Turn instructions from the smoothed heading and the destination heading.

The instruction is a pure function of its two inputs:

    Δ = wrap(ψ_target − ψ_smoothed)   with wrap into (−180°, 180°]
    aligned = |Δ| ≤ threshold           (threshold = 20° by default)

Δ is read as "rotate this many degrees clockwise from the current facing";
positive values mean turn right, negative values turn left.
"""

from dataclasses import dataclass
from typing import Optional, Union

from wayfinder.config import GuidanceConfig
from wayfinder.floorplan import Room
from wayfinder.utils.angles import angle_diff_deg


@dataclass(frozen=True)
class GuidanceInstruction:
    """Turn instruction handed to the rendering boundary.

    Attributes:
        turn_angle_deg: Signed turn in (-180, 180]. Positive = clockwise.
        is_aligned: True when the user faces the target within tolerance.
    """

    turn_angle_deg: float
    is_aligned: bool

    @property
    def direction(self) -> str:
        """'ahead' when aligned, otherwise 'right' or 'left'."""
        if self.is_aligned:
            return "ahead"
        return "right" if self.turn_angle_deg > 0 else "left"


def compute_instruction(
    heading_deg: float,
    target_heading_deg: float,
    threshold_deg: float = 20.0,
) -> GuidanceInstruction:
    """Compute the turn instruction from current heading to target heading.

    Args:
        heading_deg: Smoothed compass heading in [0, 360).
        target_heading_deg: Heading to face, in [0, 360).
        threshold_deg: Alignment tolerance (inclusive).

    Returns:
        GuidanceInstruction.

    Example:
        >>> compute_instruction(350.0, 10.0)
        GuidanceInstruction(turn_angle_deg=20.0, is_aligned=True)
        >>> compute_instruction(349.0, 10.0).is_aligned
        False
    """
    diff = float(angle_diff_deg(target_heading_deg, heading_deg))
    return GuidanceInstruction(turn_angle_deg=diff, is_aligned=abs(diff) <= threshold_deg)


class GuidanceEngine:
    """Stateless instruction calculator bound to a GuidanceConfig."""

    def __init__(self, config: Optional[GuidanceConfig] = None):
        self.config = config or GuidanceConfig()

    def instruction(
        self,
        smoothed_heading: float,
        target: Union[Room, float],
    ) -> GuidanceInstruction:
        """Instruction for facing `target` (a Room or a heading in degrees)."""
        target_heading = target.target_heading if isinstance(target, Room) else float(target)
        return compute_instruction(
            smoothed_heading,
            target_heading,
            threshold_deg=self.config.alignment_threshold_deg,
        )
