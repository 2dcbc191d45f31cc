"""Tests for identity reconciliation and wire mappings."""

import pytest

from fitlog.models import (
    BodyWeightEntry,
    Food,
    FoodLogEntry,
    Routine,
    RoutineExercise,
    RunEntry,
    Workout,
)
from fitlog.sync.reconcile import IdentityReconciler


class TestIdentityReconciler:
    """Tests for IdentityReconciler."""

    def setup_method(self):
        """Set up test fixtures."""
        self.reconciler = IdentityReconciler()

    def test_client_id_preferred(self):
        """Test the client identifier wins over the server id."""
        assert self.reconciler.client_id({"id": 42, "clientId": "abc"}) == "abc"

    def test_falls_back_to_server_id(self):
        """Test records created server-side use the stringified server id."""
        assert self.reconciler.client_id({"id": 42}) == "42"

    def test_empty_client_id_falls_back(self):
        """Test a blank clientId is treated as missing."""
        assert self.reconciler.client_id({"id": 42, "clientId": ""}) == "42"

    def test_no_identifier(self):
        """Test a record with no ids."""
        assert self.reconciler.client_id({"name": "x"}) is None

        with pytest.raises(ValueError):
            self.reconciler.reconcile({"name": "x"})

    def test_reconcile_copies(self):
        """Test reconcile rewrites id without mutating the input."""
        record = {"id": 42, "clientId": "abc", "name": "Push"}

        reconciled = self.reconciler.reconcile(record)

        assert reconciled == {"id": "abc", "clientId": "abc", "name": "Push"}
        assert record["id"] == 42

    def test_reconcile_deterministic(self):
        """Test the same record always yields the same entity id."""
        record = {"id": 9, "clientId": "w-1"}

        assert self.reconciler.reconcile(record) == self.reconciler.reconcile(record)

    def test_id_map(self):
        """Test records without a client id map their server id onto itself."""
        mapping = self.reconciler.id_map(
            [
                {"id": 1, "clientId": "a"},
                {"id": 2},
                {"clientId": "c"},
            ]
        )

        assert mapping == {"a": 1, "2": 2}


class TestWireMappings:
    """Tests for per-entity local/wire mappings."""

    def test_routine_round_trip(self):
        """Test routine wire shape carries clientId and no id."""
        routine = Routine(
            id="r1",
            name="Push",
            exercises=[RoutineExercise("2", "Bench Press", 0)],
            created_at="2026-01-01T10:00:00Z",
        )

        wire = routine.to_wire()

        assert wire["clientId"] == "r1"
        assert "id" not in wire
        assert "isFavorite" not in wire
        assert Routine.from_wire({**wire, "id": "r1"}) == routine

    def test_body_weight_wire(self):
        """Test body-weight wire shape and date truncation."""
        entry = BodyWeightEntry(id="b1", weight_kg=80.5, date="2026-01-05")

        assert entry.to_wire() == {"clientId": "b1", "weightKg": 80.5, "date": "2026-01-05"}

        parsed = BodyWeightEntry.from_wire(
            {"id": "b1", "weightKg": 80.5, "date": "2026-01-05T00:00:00.000Z"}
        )
        assert parsed == entry

    def test_food_log_wire_uses_food_data(self):
        """Test the food travels under foodData."""
        food = Food(name="Oats", calories=150, protein=5, carbs=27, fat=3, id="f1")
        entry = FoodLogEntry(
            id="l1",
            food=food,
            date="2026-01-05",
            created_at="2026-01-05T08:00:00Z",
            meal_type="breakfast",
        )

        wire = entry.to_wire()

        assert wire["clientId"] == "l1"
        assert wire["foodData"]["name"] == "Oats"
        assert "food" not in wire

        parsed = FoodLogEntry.from_wire({**wire, "id": "l1"})
        assert parsed.food == food
        assert parsed.food_id == "f1"
        assert parsed.meal_type == "breakfast"

    def test_workout_local_shape(self):
        """Test optional fields are omitted when unset."""
        workout = Workout(routine_id="r1", routine_name="Push", started_at="2026-01-05T10:00:00Z", id="w1")

        data = workout.to_dict()

        assert data["routineId"] == "r1"
        assert "completedAt" not in data
        assert Workout.from_dict(data) == workout

    def test_run_route_preserved(self):
        """Test route points survive the local mapping."""
        run = RunEntry.from_dict(
            {
                "id": "run1",
                "distanceKm": 5,
                "durationSeconds": 1500,
                "paceMinPerKm": 5,
                "startedAt": "2026-01-05T07:00:00Z",
                "completedAt": "2026-01-05T07:25:00Z",
                "route": [{"latitude": 1.0, "longitude": 2.0}],
            }
        )

        assert run.to_dict()["route"] == [{"latitude": 1.0, "longitude": 2.0}]
        assert run.to_wire()["clientId"] == "run1"
