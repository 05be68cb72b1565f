"""Body weight logging."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from nutrition_coach.domain.logs import WeightLogEntry
from nutrition_coach.domain.profile import WEIGHT_UNITS


class WeightLogRepository(Protocol):
    """Persistence interface for weight logs."""

    def upsert_weight_log(  # noqa: PLR0913
        self,
        user_id: UUID,
        weight: float,
        weight_unit: str,
        logged_date: date,
        notes: str | None,
    ) -> WeightLogEntry:
        """Store the weight for a date, replacing any entry for that date."""

    def list_weight_logs(self, user_id: UUID) -> list[WeightLogEntry]:
        """Return all weight logs ordered by date."""


@dataclass
class WeightLogService:
    """Service for weight tracking."""

    repository: WeightLogRepository

    def log(  # noqa: PLR0913
        self,
        user_id: UUID,
        weight: float,
        weight_unit: str,
        logged_date: date,
        notes: str | None = None,
    ) -> WeightLogEntry:
        """Record the weight for a day; a second entry for the day replaces it."""
        if weight <= 0:
            raise ValueError("weight must be positive")
        unit = weight_unit.strip().lower()
        if unit not in WEIGHT_UNITS:
            raise ValueError(f"Unsupported weight unit: {weight_unit}")
        return self.repository.upsert_weight_log(
            user_id, weight, unit, logged_date, notes or None
        )

    def history(self, user_id: UUID) -> list[WeightLogEntry]:
        """Return the user's weight history, oldest first."""
        return sorted(
            self.repository.list_weight_logs(user_id),
            key=lambda entry: entry.logged_date,
        )
