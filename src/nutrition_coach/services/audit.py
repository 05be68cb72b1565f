"""Audit trail for plan and profile changes."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

PLAN_ENTITY = "nutrition_plan"
PROFILE_ENTITY = "profile"


@dataclass(frozen=True)
class AuditEvent:
    """One before/after snapshot of a user-owned entity."""

    user_id: UUID
    entity_type: str
    entity_id: UUID
    event_type: str
    before: dict[str, object] | None
    after: dict[str, object] | None

    def to_row(self) -> dict[str, object]:
        return {
            "user_id": str(self.user_id),
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id),
            "event_type": self.event_type,
            "before_json": self.before,
            "after_json": self.after,
        }


class AuditRepository(Protocol):
    """Persistence interface for audit events."""

    def add_event(self, event: AuditEvent) -> None:
        """Store an audit event."""

    def list_events(
        self, user_id: UUID, entity_type: str, limit: int
    ) -> list[dict[str, object]]:
        """Return the newest events of one entity type for a user."""


@dataclass
class AuditService:
    """Records who changed what, with before/after snapshots."""

    repository: AuditRepository

    def record_plan_replaced(
        self,
        user_id: UUID,
        plan_id: UUID,
        before: dict[str, object] | None,
        after: dict[str, object],
    ) -> None:
        """Record that a user's current plan was superseded."""
        event_type = "created" if before is None else "replaced"
        self.repository.add_event(
            AuditEvent(user_id, PLAN_ENTITY, plan_id, event_type, before, after)
        )

    def record_profile_saved(
        self,
        user_id: UUID,
        before: dict[str, object] | None,
        after: dict[str, object],
    ) -> None:
        """Record an onboarding or profile edit."""
        event_type = "onboarded" if before is None else "updated"
        # profiles are one row per user, so the user id doubles as entity id
        self.repository.add_event(
            AuditEvent(user_id, PROFILE_ENTITY, user_id, event_type, before, after)
        )

    def plan_history(self, user_id: UUID, limit: int = 20) -> list[dict[str, object]]:
        """Return past plan replacements, newest first."""
        return self.repository.list_events(user_id, PLAN_ENTITY, max(1, limit))
