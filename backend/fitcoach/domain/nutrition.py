"""
Nutrition Calculations for FitCoach

Deterministic energy and macro formulas used when generating nutrition plans.
"""

import math
from typing import Optional, Union

from fitcoach.domain.models import ActivityLevel, FitnessGoal, Gender, Macros


ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHTLY_ACTIVE: 1.375,
    ActivityLevel.MODERATELY_ACTIVE: 1.55,
    ActivityLevel.VERY_ACTIVE: 1.725,
    ActivityLevel.EXTREMELY_ACTIVE: 1.9,
}

DEFAULT_ACTIVITY_MULTIPLIER = 1.2

# kcal per gram
PROTEIN_KCAL = 4
CARB_KCAL = 4
FAT_KCAL = 9

FAT_GRAMS_PER_KG = 0.9


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (76.5 -> 77)."""
    return int(math.floor(value + 0.5))


def calculate_bmr(
    weight: float,
    height: float,
    age: int,
    gender: Union[Gender, str],
) -> float:
    """
    Basal metabolic rate using the Mifflin-St Jeor equation.

    Args:
        weight: Body weight in kg
        height: Height in cm
        age: Age in years
        gender: male, female or other (other uses the male constant)

    Returns:
        BMR in kcal/day
    """
    base = 10 * weight + 6.25 * height - 5 * age
    if Gender(gender) == Gender.FEMALE:
        return base - 161
    return base + 5


def calculate_tdee(
    bmr: float,
    activity_level: Optional[Union[ActivityLevel, str]] = None,
    days_per_week: Optional[int] = None,
) -> float:
    """
    Total daily energy expenditure.

    Training frequency, when known, overrides the self-reported activity level.
    """
    if days_per_week:
        if days_per_week >= 5:
            return bmr * 1.725
        if days_per_week >= 3:
            return bmr * 1.55
        if days_per_week >= 1:
            return bmr * 1.375

    try:
        level = ActivityLevel(activity_level) if activity_level else None
    except ValueError:
        level = None
    return bmr * ACTIVITY_MULTIPLIERS.get(level, DEFAULT_ACTIVITY_MULTIPLIER)


def calculate_target_calories(
    tdee: float,
    goal: Optional[Union[FitnessGoal, str]] = None,
) -> int:
    """Daily calorie target: 20% deficit to cut, 10% surplus to bulk."""
    if goal == FitnessGoal.CUT:
        return round_half_up(tdee * 0.8)
    if goal == FitnessGoal.BULK:
        return round_half_up(tdee * 1.1)
    return round_half_up(tdee)


def calculate_macros(
    calories: int,
    weight: float,
    goal: Optional[Union[FitnessGoal, str]] = None,
) -> Macros:
    """
    Split a calorie target into protein, fat and carbs.

    Protein scales with body weight by goal, fat is fixed per kg, and the
    remaining calories go to carbs (never negative).
    """
    if goal == FitnessGoal.CUT:
        protein = round_half_up(weight * 2.2)
    elif goal == FitnessGoal.BULK:
        protein = round_half_up(weight * 1.8)
    else:
        protein = round_half_up(weight * 2.0)

    fats = round_half_up(weight * FAT_GRAMS_PER_KG)

    carb_calories = calories - protein * PROTEIN_KCAL - fats * FAT_KCAL
    carbs = max(0, round_half_up(carb_calories / CARB_KCAL))

    return Macros(protein=protein, carbs=carbs, fats=fats)
