"""
Navigation session state and the rendering snapshot.

The session is owned exclusively by the NavigationStateMachine and mutated
only through its transition operations. Renderers receive an immutable
RenderState snapshot instead of the session itself.

Modes:
    SELECTION   choose a destination (initial)
    BLUEPRINT   route overview for the chosen destination
    NAVIGATING  live guidance; "arrived" is a sub-condition of this mode
                (remaining_steps == 0), not a separate mode
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from wayfinder.floorplan import Room
from wayfinder.guidance.blueprint import BlueprintLayout
from wayfinder.guidance.engine import GuidanceInstruction


class NavMode(Enum):
    """Top-level navigation modes."""

    SELECTION = "selection"
    BLUEPRINT = "blueprint"
    NAVIGATING = "navigating"

    def __str__(self) -> str:
        return self.name


@dataclass
class NavigationSession:
    """
    Mutable navigation session.

    Attributes:
        mode: Current top-level mode.
        destination: Selected destination, or None.
        remaining_steps: Step countdown; never negative.
        last_error: User-facing message of the last sensor error, or None.
        heading: Latest smoothed heading in [0, 360), None while unavailable.
        instruction: Latest turn instruction, None while unavailable.
        blueprint: Route overview for the destination, None in SELECTION.
        sensors_active: True while sensor subscriptions are held.
    """

    mode: NavMode = NavMode.SELECTION
    destination: Optional[Room] = None
    remaining_steps: int = 0
    last_error: Optional[str] = None
    heading: Optional[float] = None
    instruction: Optional[GuidanceInstruction] = None
    blueprint: Optional[BlueprintLayout] = field(default=None, repr=False)
    sensors_active: bool = False

    @property
    def arrived(self) -> bool:
        """True once the countdown reached zero while navigating."""
        return self.mode is NavMode.NAVIGATING and self.remaining_steps == 0

    def reset_guidance(self, start_steps: int) -> None:
        """Reload the countdown and forget heading, instruction and error."""
        self.remaining_steps = start_steps
        self.heading = None
        self.instruction = None
        self.last_error = None


@dataclass(frozen=True)
class RenderState:
    """
    Read-only view of the session handed to the rendering boundary.

    Attributes:
        mode: Current mode.
        destination: Destination room name, or None.
        remaining_steps: Steps left in the countdown.
        arrived: Arrived sub-condition of NAVIGATING.
        heading: Smoothed heading, or None for "unavailable".
        instruction: Turn instruction; None when no heading is available or
                     after arrival (guidance is suppressed).
        blueprint: Route overview, or None.
        error: Active error message, or None.
        sensors_active: True while sensors are subscribed.
    """

    mode: NavMode
    destination: Optional[str]
    remaining_steps: int
    arrived: bool
    heading: Optional[float]
    instruction: Optional[GuidanceInstruction]
    blueprint: Optional[BlueprintLayout]
    error: Optional[str]
    sensors_active: bool

    @property
    def heading_available(self) -> bool:
        return self.heading is not None
