"""Models for LLM weight predictions."""

import datetime as dt
from dataclasses import dataclass

from pydantic import BaseModel, Field

from nutrition_coach.domain.stats import DailyTotals


class WeightPrediction(BaseModel):
    """Single predicted weight for a date."""

    date: dt.date
    weight: float = Field(gt=0, lt=1000)


@dataclass(frozen=True)
class NumberedDay:
    """Daily totals numbered by days since the plan was created."""

    day_number: int
    totals: DailyTotals


@dataclass(frozen=True)
class AdherenceSummary:
    """Logging and calorie adherence since the plan was created."""

    total_logged_days: int
    days_with_food: int
    days_with_water: int
    avg_calories: int
    calorie_adherence: float


@dataclass(frozen=True)
class WeightForecast:
    """Predicted trajectory with a coaching message."""

    predictions: list[WeightPrediction]
    motivational_message: str
    on_track: bool
