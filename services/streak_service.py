"""
Diet streak analytics.

Pure functions over a user's meals in chronological order; no database access.
"""

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class MealMetrics:
    total_meals: int = 0
    diet_meals: int = 0
    non_diet_meals: int = 0
    best_diet_streak: int = 0


def best_diet_streak(flags: Iterable[bool]) -> int:
    """
    Length of the longest run of consecutive diet meals.

    Args:
        flags: ``is_diet`` of each meal, oldest first

    Returns:
        0 for an empty history or one without diet meals
    """
    current = 0
    best = 0
    for is_diet in flags:
        if is_diet:
            current += 1
            if current > best:
                best = current
        else:
            current = 0
    return best


def summarize_meals(flags: Iterable[bool]) -> MealMetrics:
    """
    Meal counts and best diet streak.

    Args:
        flags: ``is_diet`` of each meal, oldest first
    """
    flags = list(flags)
    diet = sum(1 for is_diet in flags if is_diet)
    return MealMetrics(
        total_meals=len(flags),
        diet_meals=diet,
        non_diet_meals=len(flags) - diet,
        best_diet_streak=best_diet_streak(flags),
    )
