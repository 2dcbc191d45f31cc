"""Exercise catalogue and saved foods, both kept on the device only."""

import json
import logging
from dataclasses import replace

from ..config import STORAGE_KEYS
from ..models import Exercise, Food
from ..sync.local_store import StorageError
from .base import DECODE_ERRORS, EntityRepository, SyncOutcome

__all__ = ["ExerciseRepository", "SavedFoodRepository", "DEFAULT_EXERCISES"]

logger = logging.getLogger(__name__)

DEFAULT_EXERCISES = [
    ("1", "Squat", "Legs"),
    ("2", "Bench Press", "Chest"),
    ("3", "Deadlift", "Back"),
    ("4", "Barbell Row", "Back"),
    ("5", "Lat Pulldown", "Back"),
    ("6", "Overhead Press", "Shoulders"),
    ("7", "Bicep Curl", "Arms"),
    ("8", "Tricep Extension", "Arms"),
    ("9", "Leg Press", "Legs"),
    ("10", "Romanian Deadlift", "Legs"),
    ("11", "Incline DB Press", "Chest"),
    ("12", "Dumbbell Fly", "Chest"),
    ("13", "Lateral Raise", "Shoulders"),
    ("14", "Face Pull", "Shoulders"),
    ("15", "Leg Curl", "Legs"),
    ("16", "Leg Extension", "Legs"),
    ("17", "Calf Raise", "Legs"),
    ("18", "Cable Row", "Back"),
]


def default_exercises() -> list[Exercise]:
    return [
        Exercise(id=id_, name=name, muscle_group=group, is_custom=False)
        for id_, name, group in DEFAULT_EXERCISES
    ]


class ExerciseRepository(EntityRepository[Exercise]):
    """Built-in exercises plus the user's custom ones."""

    key = STORAGE_KEYS["exercises"]
    entity_cls = Exercise

    async def load_local(self) -> list[Exercise]:
        """Stored catalogue, seeded with the defaults only when absent.

        An unreadable catalogue yields the defaults for this read without
        overwriting what is stored.
        """
        try:
            raw = await self.store.get(self.key)
        except StorageError as e:
            logger.error(f"Failed to read {self.key}: {e}")
            return default_exercises()

        if raw is None:
            exercises = default_exercises()
            try:
                await self._persist(exercises)
            except StorageError as e:
                logger.error(f"Failed to seed exercises: {e}")
            return exercises

        try:
            return [self.from_local(item) for item in json.loads(raw)]
        except DECODE_ERRORS as e:
            logger.error(f"Corrupt {self.key}, using defaults: {e}")
            return default_exercises()

    async def add(self, name: str, muscle_group: str) -> tuple[Exercise, SyncOutcome]:
        exercise = Exercise(name=name, muscle_group=muscle_group, is_custom=True)
        outcome = await self.save(exercise)
        return exercise, outcome


class SavedFoodRepository(EntityRepository[Food]):
    """Foods the user bookmarked for quick logging."""

    key = STORAGE_KEYS["saved_foods"]
    entity_cls = Food

    async def add(self, food: Food) -> tuple[Food, SyncOutcome]:
        saved = replace(food, id="", is_saved=True)
        outcome = await self.save(saved)
        return saved, outcome
