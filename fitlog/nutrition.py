"""Macro target calculation and daily nutrition totals."""

import math
from typing import Iterable

from .models import FoodLogEntry, MacroTargets, UserProfile

__all__ = ["calculate_macros", "sum_macros", "round_half_up"]

ACTIVITY_MULTIPLIERS = {"5-6": 1.725}
DEFAULT_ACTIVITY_MULTIPLIER = 1.55

GOAL_ADJUSTMENTS = {
    "lose_fat": -500,
    "gain_muscle": 300,
    # recomposition and maintain eat at maintenance
}

PROTEIN_G_PER_KG = 2
FAT_CALORIE_SHARE = 0.25
KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def basal_metabolic_rate(profile: UserProfile) -> float:
    """Mifflin-St Jeor BMR in kcal/day."""
    bmr = 10 * profile.weight_kg + 6.25 * profile.height_cm - 5 * profile.age
    return bmr + 5 if profile.sex == "male" else bmr - 161


def calculate_macros(profile: UserProfile) -> MacroTargets:
    """Daily calorie and macro targets for a profile."""
    multiplier = ACTIVITY_MULTIPLIERS.get(profile.activity_level, DEFAULT_ACTIVITY_MULTIPLIER)
    tdee = basal_metabolic_rate(profile) * multiplier
    tdee += GOAL_ADJUSTMENTS.get(profile.goal, 0)

    calories = round_half_up(tdee)
    protein = round_half_up(profile.weight_kg * PROTEIN_G_PER_KG)
    fat = round_half_up(calories * FAT_CALORIE_SHARE / KCAL_PER_G_FAT)
    carbs = round_half_up(
        (calories - protein * KCAL_PER_G_PROTEIN - fat * KCAL_PER_G_FAT) / KCAL_PER_G_CARBS
    )
    return MacroTargets(calories=calories, protein=protein, carbs=carbs, fat=fat)


def sum_macros(entries: Iterable[FoodLogEntry]) -> MacroTargets:
    """Total calories and macros over food-log entries."""
    totals = MacroTargets()
    for entry in entries:
        food = entry.food
        totals = totals + MacroTargets(
            calories=food.calories,
            protein=food.protein,
            carbs=food.carbs,
            fat=food.fat,
        )
    return totals
