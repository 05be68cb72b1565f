"""User and onboarding profile logic."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from nutrition_coach.domain.models import ProfileRecord, UserRecord
from nutrition_coach.domain.plan import PlanRecord
from nutrition_coach.domain.profile import UserProfileInput
from nutrition_coach.errors import InvalidProfileError, ProfileNotFoundError
from nutrition_coach.services.audit import AuditService
from nutrition_coach.services.plans import NutritionPlanService


class UserRepository(Protocol):
    """Persistence interface for users and their profiles."""

    def get_by_auth_id(self, auth_user_id: str) -> UserRecord | None:
        """Return the user for an authenticated identity, if present."""

    def create_user(self, auth_user_id: str) -> UserRecord:
        """Create and return a new user record."""

    def touch_last_active(self, user_id: UUID) -> None:
        """Update the last active timestamp for the user."""

    def set_timezone(self, user_id: UUID, timezone: str) -> None:
        """Update the user's timezone."""

    def get_profile(self, user_id: UUID) -> ProfileRecord | None:
        """Return the stored onboarding profile."""

    def save_profile(self, user_id: UUID, profile: UserProfileInput) -> ProfileRecord:
        """Insert or overwrite the user's profile."""


@dataclass
class UserService:
    """Application service for user lifecycle actions."""

    repository: UserRepository

    def ensure_user(self, auth_user_id: str) -> UserRecord:
        """Ensure a user exists for the authenticated identity and return it."""
        existing = self.repository.get_by_auth_id(auth_user_id)
        if existing:
            self.repository.touch_last_active(existing.id)
            return existing
        return self.repository.create_user(auth_user_id)

    def set_timezone(self, user_id: UUID, timezone: str) -> None:
        """Persist a user's timezone."""
        self.repository.set_timezone(user_id, timezone)


@dataclass
class ProfileService:
    """Onboarding and profile edits, each producing a fresh plan."""

    repository: UserRepository
    plan_service: NutritionPlanService
    audit_service: AuditService

    def complete_onboarding(
        self, user_id: UUID, profile: UserProfileInput
    ) -> tuple[ProfileRecord, PlanRecord]:
        """Store the onboarding answers and the plan computed from them."""
        return self._save(user_id, profile)

    def update_profile(
        self, user_id: UUID, profile: UserProfileInput
    ) -> tuple[ProfileRecord, PlanRecord]:
        """Overwrite the profile and supersede the current plan."""
        if self.repository.get_profile(user_id) is None:
            raise ProfileNotFoundError(f"User {user_id} has not completed onboarding")
        return self._save(user_id, profile)

    def get_profile(self, user_id: UUID) -> ProfileRecord:
        """Return the stored profile or raise if onboarding is incomplete."""
        record = self.repository.get_profile(user_id)
        if record is None:
            raise ProfileNotFoundError(f"User {user_id} has not completed onboarding")
        return record

    def _save(
        self, user_id: UUID, profile: UserProfileInput
    ) -> tuple[ProfileRecord, PlanRecord]:
        result = self.plan_service.preview(profile)
        if not result.ok:
            raise InvalidProfileError(result.invalid_fields)
        previous = self.repository.get_profile(user_id)
        saved = self.repository.save_profile(user_id, profile)
        self.audit_service.record_profile_saved(
            user_id=user_id,
            before=previous.profile.to_dict() if previous else None,
            after=profile.to_dict(),
        )
        plan = self.plan_service.store_plan(user_id, result.plan)
        return saved, plan
