"""Request models for the HTTP API."""

from datetime import date
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import AwareDatetime, BaseModel, Field, field_validator

from nutrition_coach.domain.profile import UserProfileInput


class ProfilePayload(BaseModel):
    """Onboarding questionnaire answers.

    Numeric answers stay strings, matching what the form submits.
    """

    age: int | str
    gender: str
    height: str
    height_unit: Literal["cm", "ft"]
    weight: str
    weight_unit: Literal["lbs", "kg"]
    activity_level: str
    primary_goal: str
    target_weight: str = ""
    timeline: str = "moderate"
    timezone: str | None = None

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str | None) -> str | None:
        if value is None:
            return None
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    def to_profile(self) -> UserProfileInput:
        """Convert to the calculator's input record."""
        return UserProfileInput(
            age=self.age,
            gender=self.gender,
            height=self.height,
            height_unit=self.height_unit,
            weight=self.weight,
            weight_unit=self.weight_unit,
            activity_level=self.activity_level,
            primary_goal=self.primary_goal,
            target_weight=self.target_weight,
            timeline=self.timeline,
        )


class FoodLogPayload(BaseModel):
    """A food log from an FDC lookup or from manual entry."""

    meal_type: str = "snacks"
    fdc_id: int | None = None
    grams: float | None = Field(default=None, gt=0)
    name: str | None = None
    calories: float | None = Field(default=None, ge=0)
    protein: float = Field(default=0.0, ge=0)
    carbs: float = Field(default=0.0, ge=0)
    fats: float = Field(default=0.0, ge=0)
    portion: str = "1 serving"
    logged_at: AwareDatetime | None = None


class WaterLogPayload(BaseModel):
    """Water intake in millilitres."""

    amount_ml: int = Field(gt=0, le=5000)
    logged_at: AwareDatetime | None = None


class WeightLogPayload(BaseModel):
    """A weigh-in for one date."""

    weight: float = Field(gt=0, lt=1000)
    weight_unit: Literal["lbs", "kg"]
    logged_date: date | None = None
    notes: str | None = None
