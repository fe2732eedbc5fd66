"""Domain models for statistics."""

from dataclasses import dataclass
from datetime import date

from calorie_tracker.domain.models import FoodEntry, Goals


@dataclass(frozen=True)
class DailyTotals:
    """Summed macros for one day."""

    calories: int
    protein: int
    carbs: int
    fats: int


@dataclass(frozen=True)
class WeekdayCalories:
    """Calories for one day of the rolling week."""

    day: str
    date: date
    calories: int


@dataclass(frozen=True)
class DashboardSummary:
    """Everything the daily dashboard shows."""

    date: date
    goals: Goals
    consumed: DailyTotals
    calories_left: int
    streak_count: int
    foods: list[FoodEntry]
