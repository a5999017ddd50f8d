"""Pedestrian dead-reckoning guidance engine.

This package contains the reusable components of the wayfinder guidance core:
- sensors: Compass smoothing, step detection and sensor capability interfaces
- guidance: Turn instructions and blueprint (floor plan) geometry
- navigation: Session state and the navigation state machine
- sim: Synthetic walks and scripted sensor sources for tests and demos
- utils: Angle helpers shared by the modules above

Top-level modules:
- config: GuidanceConfig policy values
- floorplan: Rooms and the default floor plan
- errors: Error kinds raised by the core and its sensor collaborators
"""

from wayfinder.config import GuidanceConfig
from wayfinder.floorplan import FloorPlan, Room

__version__ = "0.1.0"

__all__ = ["GuidanceConfig", "FloorPlan", "Room"]
