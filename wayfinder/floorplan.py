"""
Room configuration for the floor plan.

Rooms are static configuration loaded once at startup and never mutated:
each has a centre position in plan units and a target compass heading (the
bearing to face when oriented at that room).

Plan coordinates follow screen convention: x grows to the right, y grows
downwards (towards the bottom of the blueprint canvas).

JSON layout accepted by FloorPlan.from_json:

    {
        "start": "Living Room",
        "rooms": {
            "Kitchen": {"x": 77.5, "y": 315, "heading": 170},
            ...
        }
    }
"""

import json
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Tuple, Union

import numpy as np


@dataclass(frozen=True)
class Room:
    """
    Named room of the floor plan.

    Attributes:
        name: Unique room name.
        x: Centre x in plan units (right = +x).
        y: Centre y in plan units (down = +y).
        target_heading: Compass heading to face, degrees in [0, 360).
                        0 = North, 90 = East, 180 = South, 270 = West.
    """

    name: str
    x: float
    y: float
    target_heading: float

    def __post_init__(self) -> None:
        """Validate the room definition."""
        if not isinstance(self.name, str) or not self.name:
            raise ValueError(f"Room name must be a non-empty string, got {self.name!r}")
        if not (np.isfinite(self.x) and np.isfinite(self.y)):
            raise ValueError(f"Room {self.name!r} position must be finite, got ({self.x}, {self.y})")
        if not 0.0 <= self.target_heading < 360.0:
            raise ValueError(
                f"Room {self.name!r} target_heading must be in [0, 360), "
                f"got {self.target_heading}"
            )

    @property
    def position(self) -> np.ndarray:
        """Centre as array [x, y]."""
        return np.array([self.x, self.y], dtype=float)


# Four-room house used by the default floor plan. The start point is the
# centre of the living room.
DEFAULT_START = "Living Room"
DEFAULT_ROOMS: Tuple[Room, ...] = (
    Room("Kitchen", 77.5, 315.0, 170.0),
    Room("Bathroom", 222.5, 315.0, 190.0),
    Room("Bedroom", 222.5, 85.0, 10.0),
    Room("Living Room", 77.5, 85.0, 350.0),
)


class FloorPlan:
    """Immutable set of rooms plus the fixed starting room.

    Usage:
        >>> plan = FloorPlan.default()
        >>> plan.start.name
        'Living Room'
        >>> plan.room("Kitchen").target_heading
        170.0
        >>> [room.name for room in plan.destinations]
        ['Kitchen', 'Bathroom', 'Bedroom', 'Living Room']
    """

    def __init__(self, rooms: Iterable[Room], start: str):
        ordered: Dict[str, Room] = {}
        for room in rooms:
            if room.name in ordered:
                raise ValueError(f"Duplicate room name {room.name!r}")
            ordered[room.name] = room
        if not ordered:
            raise ValueError("A floor plan needs at least one room")
        if start not in ordered:
            raise ValueError(f"Start room {start!r} is not part of the floor plan")

        self._rooms: Mapping[str, Room] = MappingProxyType(ordered)
        self._start = start

    @classmethod
    def default(cls) -> "FloorPlan":
        return cls(DEFAULT_ROOMS, DEFAULT_START)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FloorPlan":
        """Build a floor plan from the JSON structure described above."""
        try:
            room_entries = data["rooms"]
            start = data["start"]
        except KeyError as exc:
            raise ValueError(f"Floor plan is missing key {exc.args[0]!r}") from None

        rooms = []
        for name, entry in room_entries.items():
            try:
                rooms.append(Room(name, float(entry["x"]), float(entry["y"]), float(entry["heading"])))
            except KeyError as exc:
                raise ValueError(f"Room {name!r} is missing key {exc.args[0]!r}") from None
        return cls(rooms, start)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "FloorPlan":
        """Load a floor plan from a JSON file."""
        with open(path) as f:
            return cls.from_dict(json.load(f))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self._start,
            "rooms": {
                room.name: {"x": room.x, "y": room.y, "heading": room.target_heading}
                for room in self._rooms.values()
            },
        }

    @property
    def rooms(self) -> Mapping[str, Room]:
        """Read-only mapping of room name to Room, in definition order."""
        return self._rooms

    @property
    def start(self) -> Room:
        return self._rooms[self._start]

    @property
    def destinations(self) -> Tuple[Room, ...]:
        """Selectable destinations, in definition order."""
        return tuple(self._rooms.values())

    def room(self, name: str) -> Room:
        """Look up a room by name.

        Raises:
            KeyError: If no room has this name.
        """
        try:
            return self._rooms[name]
        except KeyError:
            raise KeyError(f"Unknown room {name!r}; known rooms: {list(self._rooms)}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    def __iter__(self):
        return iter(self._rooms.values())

    def __repr__(self) -> str:
        return f"FloorPlan(rooms={list(self._rooms)}, start={self._start!r})"
