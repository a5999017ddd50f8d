"""
Direction scoring and route overview geometry.

Modules:
    engine: Turn instruction and alignment flag (GuidanceEngine)
    blueprint: Floor plan rotation/scale transform and path endpoints
"""

from wayfinder.guidance.engine import (
    GuidanceEngine,
    GuidanceInstruction,
    compute_instruction,
)

from wayfinder.guidance.blueprint import (
    BlueprintLayout,
    RoomRect,
    fit_scale,
    layout,
    rotation_matrix_2d,
)

__all__ = [
    "GuidanceEngine",
    "GuidanceInstruction",
    "compute_instruction",
    "BlueprintLayout",
    "RoomRect",
    "fit_scale",
    "layout",
    "rotation_matrix_2d",
]
