"""Domain models for the nutrition coach."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from nutrition_coach.domain.profile import UserProfileInput


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the database."""

    id: UUID
    auth_user_id: str
    timezone: str = "UTC"
    last_active_at: datetime | None = None


@dataclass(frozen=True)
class ProfileRecord:
    """A user's stored onboarding profile."""

    user_id: UUID
    profile: UserProfileInput
    updated_at: datetime | None = None
