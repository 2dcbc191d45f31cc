"""Local-first repositories, one per entity type."""

from .base import EntityRepository, SingletonRepository, SyncOutcome
from .body_weights import BodyWeightRepository
from .exercises import ExerciseRepository, SavedFoodRepository
from .food_log import FoodLogRepository
from .macro_targets import MacroTargetsRepository
from .profile import UserProfileRepository
from .routines import RoutineRepository
from .runs import RunRepository
from .workouts import WorkoutRepository

__all__ = [
    "EntityRepository",
    "SingletonRepository",
    "SyncOutcome",
    "BodyWeightRepository",
    "ExerciseRepository",
    "SavedFoodRepository",
    "FoodLogRepository",
    "MacroTargetsRepository",
    "UserProfileRepository",
    "RoutineRepository",
    "RunRepository",
    "WorkoutRepository",
]
