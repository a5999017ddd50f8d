"""
Unit tests for wayfinder/floorplan.py (rooms and floor plan).

Run with: pytest tests/wayfinder/test_floorplan.py -v
"""

import json
import tempfile
import unittest
from pathlib import Path

import numpy as np
import pytest

from wayfinder.floorplan import DEFAULT_ROOMS, FloorPlan, Room


class TestRoom(unittest.TestCase):

    def test_position(self) -> None:
        room = Room("Kitchen", 77.5, 315.0, 170.0)

        assert np.allclose(room.position, [77.5, 315.0])

    def test_heading_range(self) -> None:
        Room("North", 0.0, 0.0, 0.0)

        with pytest.raises(ValueError, match="target_heading"):
            Room("Full circle", 0.0, 0.0, 360.0)
        with pytest.raises(ValueError, match="target_heading"):
            Room("Negative", 0.0, 0.0, -10.0)

    def test_non_finite_position(self) -> None:
        with pytest.raises(ValueError, match="finite"):
            Room("Void", float("nan"), 0.0, 0.0)

    def test_empty_name(self) -> None:
        with pytest.raises(ValueError, match="name"):
            Room("", 0.0, 0.0, 0.0)


class TestDefaultPlan(unittest.TestCase):

    def setUp(self) -> None:
        self.plan = FloorPlan.default()

    def test_start_is_living_room(self) -> None:
        assert self.plan.start.name == "Living Room"
        assert np.allclose(self.plan.start.position, [77.5, 85.0])

    def test_room_headings(self) -> None:
        headings = {room.name: room.target_heading for room in self.plan}

        assert headings == {
            "Kitchen": 170.0,
            "Bathroom": 190.0,
            "Bedroom": 10.0,
            "Living Room": 350.0,
        }

    def test_destinations_in_definition_order(self) -> None:
        names = [room.name for room in self.plan.destinations]

        assert names == ["Kitchen", "Bathroom", "Bedroom", "Living Room"]

    def test_lookup(self) -> None:
        assert self.plan.room("Bedroom") == DEFAULT_ROOMS[2]
        assert "Kitchen" in self.plan
        assert "Garage" not in self.plan
        assert len(self.plan) == 4

    def test_unknown_room(self) -> None:
        with pytest.raises(KeyError, match="Garage"):
            self.plan.room("Garage")

    def test_rooms_read_only(self) -> None:
        with pytest.raises(TypeError):
            self.plan.rooms["Garage"] = Room("Garage", 0.0, 0.0, 0.0)


class TestPlanValidation(unittest.TestCase):

    def test_duplicate_names(self) -> None:
        rooms = [Room("A", 0.0, 0.0, 0.0), Room("A", 1.0, 1.0, 0.0)]

        with pytest.raises(ValueError, match="Duplicate"):
            FloorPlan(rooms, "A")

    def test_unknown_start(self) -> None:
        with pytest.raises(ValueError, match="Start room"):
            FloorPlan([Room("A", 0.0, 0.0, 0.0)], "B")

    def test_empty_plan(self) -> None:
        with pytest.raises(ValueError, match="at least one room"):
            FloorPlan([], "A")


class TestPlanSerialization(unittest.TestCase):

    def test_dict_roundtrip(self) -> None:
        plan = FloorPlan.default()

        restored = FloorPlan.from_dict(plan.to_dict())

        assert list(restored.rooms) == list(plan.rooms)
        assert restored.start == plan.start
        assert restored.room("Bathroom") == plan.room("Bathroom")

    def test_from_json(self) -> None:
        data = {
            "start": "Hall",
            "rooms": {
                "Hall": {"x": 10, "y": 20, "heading": 0},
                "Study": {"x": 10, "y": 200, "heading": 180},
            },
        }
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "plan.json"
            path.write_text(json.dumps(data))

            plan = FloorPlan.from_json(path)

        assert plan.start.name == "Hall"
        assert plan.room("Study").target_heading == 180.0

    def test_missing_keys(self) -> None:
        with pytest.raises(ValueError, match="start"):
            FloorPlan.from_dict({"rooms": {}})
        with pytest.raises(ValueError, match="heading"):
            FloorPlan.from_dict({"start": "A", "rooms": {"A": {"x": 0, "y": 0}}})


if __name__ == "__main__":
    unittest.main()
