"""Workout repository and per-exercise history queries."""

import logging
from typing import Optional

from ..config import STORAGE_KEYS
from ..models import ProgressionSuggestion, Workout, WorkoutSet
from ..progression import suggest_progression
from .base import EntityRepository

__all__ = ["WorkoutRepository"]

logger = logging.getLogger(__name__)


class WorkoutRepository(EntityRepository[Workout]):
    """Logged workouts. The server has no delete route, so deletes stay local."""

    key = STORAGE_KEYS["workouts"]
    entity_cls = Workout
    endpoint = "/api/workouts"

    async def last_sets_for_exercise(self, exercise_id: str) -> Optional[list[WorkoutSet]]:
        """Sets from the most recently completed workout that trained exercise_id.

        Returns None when no completed workout logged a set for it.
        """
        completed = [w for w in await self.get_all() if w.completed_at]
        # ISO-8601 timestamps sort chronologically as strings
        completed.sort(key=lambda w: w.completed_at, reverse=True)

        for workout in completed:
            for exercise in workout.exercises:
                if exercise.exercise_id == exercise_id and exercise.sets:
                    return list(exercise.sets)
        return None

    async def suggest_for_exercise(
        self, exercise_id: str, exercise_name: str
    ) -> ProgressionSuggestion:
        """Progression suggestion based on the exercise's last session."""
        last_sets = await self.last_sets_for_exercise(exercise_id) or []
        return suggest_progression(exercise_id, exercise_name, last_sets)
