"""Supabase repository for food logs."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from nutrition_coach.domain.logs import FoodLogEntry
from nutrition_coach.domain.nutrition import NutrientProfile
from nutrition_coach.services.food_logs import FoodLogRepository

_COLUMNS = (
    "id, user_id, name, calories, protein, carbs, fats, portion, meal_type, "
    "logged_at, fdc_id"
)


@dataclass
class SupabaseFoodLogRepository(FoodLogRepository):
    """Supabase implementation for food logs."""

    client: Client

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
        """Insert a food log row."""
        response = (
            self.client.table("food_logs")
            .insert(
                {
                    "user_id": str(user_id),
                    "name": name,
                    "calories": nutrients.calories,
                    "protein": nutrients.protein_g,
                    "carbs": nutrients.carbs_g,
                    "fats": nutrients.fats_g,
                    "portion": portion,
                    "meal_type": meal_type,
                    "logged_at": logged_at.isoformat(),
                    "fdc_id": fdc_id,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food log in Supabase")
        return _parse_row(response.data[0])

    def list_food_logs(
        self, user_id: UUID, start: datetime | None = None, end: datetime | None = None
    ) -> list[FoodLogEntry]:
        """Return food logs in the time range, oldest first."""
        query = (
            self.client.table("food_logs").select(_COLUMNS).eq("user_id", str(user_id))
        )
        if start is not None:
            query = query.gte("logged_at", start.isoformat())
        if end is not None:
            query = query.lt("logged_at", end.isoformat())
        response = query.order("logged_at", desc=False).execute()
        return [_parse_row(row) for row in response.data or []]

    def delete_food_log(self, user_id: UUID, food_log_id: UUID) -> bool:
        """Delete a food log owned by the user."""
        response = (
            self.client.table("food_logs")
            .delete()
            .eq("id", str(food_log_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _parse_row(row: dict[str, object]) -> FoodLogEntry:
    fdc_id = row.get("fdc_id")
    return FoodLogEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        name=str(row.get("name") or ""),
        calories=float(row.get("calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        carbs=float(row.get("carbs") or 0.0),
        fats=float(row.get("fats") or 0.0),
        portion=str(row.get("portion") or ""),
        meal_type=str(row.get("meal_type") or "snacks"),
        logged_at=datetime.fromisoformat(str(row["logged_at"])),
        fdc_id=int(fdc_id) if fdc_id is not None else None,
    )
