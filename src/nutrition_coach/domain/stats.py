"""Domain models for progress statistics."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DailyTotals:
    """Daily intake totals."""

    day: date
    calories: float
    protein: float
    carbs: float
    fats: float
    water_ml: float
    logged_food: bool = False
    logged_water: bool = False


@dataclass(frozen=True)
class GoalProgress:
    """Intake against a plan target."""

    current: float
    target: float
    percentage: float
    remaining: float


@dataclass(frozen=True)
class DailyProgress:
    """A day's totals with completion against the current plan."""

    totals: DailyTotals
    calories: GoalProgress
    protein: GoalProgress
    carbs: GoalProgress
    fats: GoalProgress
    water: GoalProgress


@dataclass(frozen=True)
class PeriodSummary:
    """Aggregated totals for a period."""

    daily: list[DailyTotals]
    avg_calories: float
    avg_protein: float
    avg_carbs: float
    avg_fats: float
    avg_water_ml: float
