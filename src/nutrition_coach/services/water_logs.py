"""Water intake logging."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from nutrition_coach.domain.logs import WaterLogEntry


class WaterLogRepository(Protocol):
    """Persistence interface for water logs."""

    def create_water_log(
        self, user_id: UUID, amount_ml: int, logged_at: datetime
    ) -> WaterLogEntry:
        """Persist a water log and return it."""

    def list_water_logs(
        self, user_id: UUID, start: datetime | None = None, end: datetime | None = None
    ) -> list[WaterLogEntry]:
        """Return water logs in the time range, oldest first."""


@dataclass
class WaterLogService:
    """Service for recording water intake."""

    repository: WaterLogRepository

    def log(
        self, user_id: UUID, amount_ml: int, logged_at: datetime | None = None
    ) -> WaterLogEntry:
        """Record a glass, bottle or custom amount of water."""
        if amount_ml <= 0:
            raise ValueError("amount_ml must be positive")
        return self.repository.create_water_log(
            user_id, amount_ml, logged_at or datetime.now(tz=UTC)
        )
