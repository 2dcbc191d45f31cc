"""Load progression suggestions from the last session's sets."""

import math
from typing import Sequence

from .models import ProgressionSuggestion, WorkoutSet

__all__ = ["suggest_progression", "round_to_step"]

HEAVY_THRESHOLD = 50  # lbs; heavier lifts progress in bigger jumps
HEAVY_INCREMENT = 5
LIGHT_INCREMENT = 2.5
DELOAD_FRACTION = 0.05
PLATE_STEP = 2.5


def round_to_step(value: float, step: float = PLATE_STEP) -> float:
    """Round to the nearest multiple of step, halves rounding up."""
    return math.floor(value / step + 0.5) * step


def _fmt(weight: float) -> str:
    return f"{weight:g}"


def suggest_progression(
    exercise_id: str,
    exercise_name: str,
    last_sets: Sequence[WorkoutSet],
) -> ProgressionSuggestion:
    """Suggest the next working weight.

    All sets completed -> add 5 (2.5 under 50). Two or more misses -> deload
    5% rounded to a 2.5 step. Anything else -> repeat the weight.
    """
    if not last_sets:
        return ProgressionSuggestion(
            exercise_id, exercise_name, 0, "Start with a comfortable weight"
        )

    failed = [s for s in last_sets if not s.completed]
    last_weight = last_sets[0].weight

    if not failed:
        increase = HEAVY_INCREMENT if last_weight >= HEAVY_THRESHOLD else LIGHT_INCREMENT
        weight = last_weight + increase
        return ProgressionSuggestion(
            exercise_id,
            exercise_name,
            weight,
            f"Great work! Try {_fmt(weight)} lbs next time",
        )

    if len(failed) >= 2:
        weight = round_to_step(last_weight - last_weight * DELOAD_FRACTION)
        return ProgressionSuggestion(
            exercise_id,
            exercise_name,
            weight,
            f"Deload to {_fmt(weight)} lbs and focus on form",
        )

    return ProgressionSuggestion(
        exercise_id,
        exercise_name,
        last_weight,
        f"Stick with {_fmt(last_weight)} lbs until you hit all reps",
    )
