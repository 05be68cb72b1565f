"""Food logging service."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from nutrition_coach.domain.logs import MEAL_TYPES, FoodLogEntry
from nutrition_coach.domain.nutrition import NutrientProfile
from nutrition_coach.services.food_lookup import FoodLookupService, calculate_portion


class FoodLogRepository(Protocol):
    """Persistence interface for food logs."""

    def create_food_log(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        nutrients: NutrientProfile,
        portion: str,
        meal_type: str,
        logged_at: datetime,
        fdc_id: int | None,
    ) -> FoodLogEntry:
        """Persist a food log and return it."""

    def list_food_logs(
        self, user_id: UUID, start: datetime | None = None, end: datetime | None = None
    ) -> list[FoodLogEntry]:
        """Return food logs in the time range, oldest first."""

    def delete_food_log(self, user_id: UUID, food_log_id: UUID) -> bool:
        """Delete a food log owned by the user; return True if it existed."""


@dataclass
class FoodLogService:
    """Turns food lookups and manual entries into food log rows."""

    food_lookup: FoodLookupService
    repository: FoodLogRepository

    async def log_food(
        self,
        user_id: UUID,
        fdc_id: int,
        grams: float,
        meal_type: str,
        logged_at: datetime | None = None,
    ) -> FoodLogEntry:
        """Look up a food and log a portion of it."""
        food = await self.food_lookup.get_food(fdc_id)
        portion = calculate_portion(food.per_100g, grams)
        return self.repository.create_food_log(
            user_id=user_id,
            name=food.summary.display_name,
            nutrients=portion,
            portion=f"{_format_grams(grams)}g",
            meal_type=_meal_type(meal_type),
            logged_at=logged_at or datetime.now(tz=UTC),
            fdc_id=fdc_id,
        )

    def log_manual(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        nutrients: NutrientProfile,
        portion: str,
        meal_type: str,
        logged_at: datetime | None = None,
    ) -> FoodLogEntry:
        """Log a food whose nutrients the user entered directly."""
        return self.repository.create_food_log(
            user_id=user_id,
            name=name.strip() or "Food",
            nutrients=nutrients,
            portion=portion,
            meal_type=_meal_type(meal_type),
            logged_at=logged_at or datetime.now(tz=UTC),
            fdc_id=None,
        )

    def list_day(
        self, user_id: UUID, day: datetime, timezone_name: str
    ) -> list[FoodLogEntry]:
        """Return the user's logs for the local calendar day containing ``day``."""
        tz = ZoneInfo(timezone_name)
        start = day.astimezone(tz).replace(hour=0, minute=0, second=0, microsecond=0)
        end = start + timedelta(days=1)
        return self.repository.list_food_logs(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )

    def delete(self, user_id: UUID, food_log_id: UUID) -> bool:
        """Delete a food log."""
        return self.repository.delete_food_log(user_id, food_log_id)


def _meal_type(value: str) -> str:
    cleaned = value.strip().lower()
    if cleaned == "snack":
        return "snacks"
    return cleaned if cleaned in MEAL_TYPES else "snacks"


def _format_grams(grams: float) -> str:
    return str(int(grams)) if float(grams).is_integer() else f"{grams:g}"
