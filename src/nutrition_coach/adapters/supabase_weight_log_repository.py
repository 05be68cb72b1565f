"""Supabase repository for weight logs."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from nutrition_coach.domain.logs import WeightLogEntry
from nutrition_coach.services.weight_logs import WeightLogRepository


@dataclass
class SupabaseWeightLogRepository(WeightLogRepository):
    """Supabase implementation for weight logs, one row per user and date."""

    client: Client

    def upsert_weight_log(  # noqa: PLR0913
        self,
        user_id: UUID,
        weight: float,
        weight_unit: str,
        logged_date: date,
        notes: str | None,
    ) -> WeightLogEntry:
        """Insert or replace the weight for a date."""
        response = (
            self.client.table("weight_logs")
            .upsert(
                {
                    "user_id": str(user_id),
                    "weight": weight,
                    "weight_unit": weight_unit,
                    "logged_date": logged_date.isoformat(),
                    "notes": notes,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="user_id,logged_date",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save weight log in Supabase")
        return _parse_row(response.data[0])

    def list_weight_logs(self, user_id: UUID) -> list[WeightLogEntry]:
        """Return all weight logs ordered by date."""
        response = (
            self.client.table("weight_logs")
            .select("id, user_id, weight, weight_unit, logged_date, notes")
            .eq("user_id", str(user_id))
            .order("logged_date", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> WeightLogEntry:
    return WeightLogEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        weight=float(row.get("weight") or 0.0),
        weight_unit=str(row.get("weight_unit") or "kg"),
        logged_date=date.fromisoformat(str(row["logged_date"])),
        notes=row.get("notes"),
    )
