"""Supabase repository for water logs."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from nutrition_coach.domain.logs import WaterLogEntry
from nutrition_coach.services.water_logs import WaterLogRepository


@dataclass
class SupabaseWaterLogRepository(WaterLogRepository):
    """Supabase implementation for water logs."""

    client: Client

    def create_water_log(
        self, user_id: UUID, amount_ml: int, logged_at: datetime
    ) -> WaterLogEntry:
        """Insert a water log row."""
        response = (
            self.client.table("water_logs")
            .insert(
                {
                    "user_id": str(user_id),
                    "amount_ml": amount_ml,
                    "logged_at": logged_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create water log in Supabase")
        return _parse_row(response.data[0])

    def list_water_logs(
        self, user_id: UUID, start: datetime | None = None, end: datetime | None = None
    ) -> list[WaterLogEntry]:
        """Return water logs in the time range, oldest first."""
        query = (
            self.client.table("water_logs")
            .select("id, user_id, amount_ml, logged_at")
            .eq("user_id", str(user_id))
        )
        if start is not None:
            query = query.gte("logged_at", start.isoformat())
        if end is not None:
            query = query.lt("logged_at", end.isoformat())
        response = query.order("logged_at", desc=False).execute()
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> WaterLogEntry:
    return WaterLogEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        amount_ml=int(row.get("amount_ml") or 0),
        logged_at=datetime.fromisoformat(str(row["logged_at"])),
    )
