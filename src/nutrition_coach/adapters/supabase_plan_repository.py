"""Supabase repository for nutrition plans."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from nutrition_coach.domain.plan import NutritionPlan, PlanRecord
from nutrition_coach.services.plans import PlanRepository


@dataclass
class SupabasePlanRepository(PlanRepository):
    """Keeps a single nutrition_plans row per user."""

    client: Client

    def get_current_plan(self, user_id: UUID) -> PlanRecord | None:
        """Return the user's current plan, if any."""
        response = (
            self.client.table("nutrition_plans")
            .select("*")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def replace_plan(self, user_id: UUID, plan: NutritionPlan) -> PlanRecord:
        """Delete prior plans for the user and insert the new one."""
        self.client.table("nutrition_plans").delete().eq(
            "user_id", str(user_id)
        ).execute()
        response = (
            self.client.table("nutrition_plans")
            .insert(
                {
                    "user_id": str(user_id),
                    **plan.to_dict(),
                    "created_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create nutrition plan in Supabase")
        return _parse_row(response.data[0])


def _parse_row(row: dict[str, object]) -> PlanRecord:
    created_raw = row.get("created_at")
    return PlanRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        plan=NutritionPlan.from_dict(row),
        created_at=datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else datetime.now(tz=UTC),
    )
