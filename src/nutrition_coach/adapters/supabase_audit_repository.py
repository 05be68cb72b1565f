"""Supabase repository for audit events."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from nutrition_coach.services.audit import AuditEvent, AuditRepository

_HISTORY_COLUMNS = "entity_id, event_type, before_json, after_json, created_at"


@dataclass
class SupabaseAuditRepository(AuditRepository):
    """Audit events stored in the ``audit_events`` table."""

    client: Client

    def add_event(self, event: AuditEvent) -> None:
        self.client.table("audit_events").insert(event.to_row()).execute()

    def list_events(
        self, user_id: UUID, entity_type: str, limit: int
    ) -> list[dict[str, object]]:
        """Return the newest audit events of one entity type for a user."""
        response = (
            self.client.table("audit_events")
            .select(_HISTORY_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("entity_type", entity_type)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return list(response.data or [])
