"""Domain models for food, water and weight logs."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

MEAL_TYPES = ("breakfast", "lunch", "dinner", "snacks")


@dataclass(frozen=True)
class FoodLogEntry:
    """A logged portion of food with its computed nutrients."""

    id: UUID
    user_id: UUID
    name: str
    calories: float
    protein: float
    carbs: float
    fats: float
    portion: str
    meal_type: str
    logged_at: datetime
    fdc_id: int | None = None


@dataclass(frozen=True)
class WaterLogEntry:
    """A logged amount of water."""

    id: UUID
    user_id: UUID
    amount_ml: int
    logged_at: datetime


@dataclass(frozen=True)
class WeightLogEntry:
    """A body weight measurement for one calendar day."""

    id: UUID
    user_id: UUID
    weight: float
    weight_unit: str
    logged_date: date
    notes: str | None = None
