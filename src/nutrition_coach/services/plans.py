"""Nutrition plan service."""

import logging
from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID

from nutrition_coach.domain.plan import (
    NutritionPlan,
    PlanOptions,
    PlanRecord,
    PlanResult,
)
from nutrition_coach.domain.profile import UserProfileInput
from nutrition_coach.errors import InvalidProfileError, PlanNotFoundError
from nutrition_coach.services.audit import AuditService
from nutrition_coach.services.plan_calculator import generate_nutrition_plan

_logger = logging.getLogger(__name__)


class PlanRepository(Protocol):
    """Persistence interface for nutrition plans."""

    def get_current_plan(self, user_id: UUID) -> PlanRecord | None:
        """Return the user's current plan, if any."""

    def replace_plan(self, user_id: UUID, plan: NutritionPlan) -> PlanRecord:
        """Delete any prior plan for the user and store the new one."""


@dataclass
class NutritionPlanService:
    """Computes plans and keeps exactly one current plan per user."""

    repository: PlanRepository
    audit_service: AuditService
    options: PlanOptions = field(default_factory=PlanOptions)

    def preview(self, profile: UserProfileInput) -> PlanResult:
        """Compute a plan without storing it."""
        plan = generate_nutrition_plan(profile, self.options)
        return PlanResult(plan=plan, invalid_fields=plan.invalid_fields())

    def create_plan(self, user_id: UUID, profile: UserProfileInput) -> PlanRecord:
        """Compute a plan and make it the user's current plan."""
        result = self.preview(profile)
        if not result.ok:
            _logger.warning(
                "Rejected plan for user %s: invalid fields %s",
                user_id,
                ",".join(result.invalid_fields),
            )
            raise InvalidProfileError(result.invalid_fields)
        return self.store_plan(user_id, result.plan)

    def store_plan(self, user_id: UUID, plan: NutritionPlan) -> PlanRecord:
        """Replace the user's current plan with an already computed one."""
        previous = self.repository.get_current_plan(user_id)
        record = self.repository.replace_plan(user_id, plan)
        self.audit_service.record_plan_replaced(
            user_id=user_id,
            plan_id=record.id,
            before=previous.plan.to_dict() if previous else None,
            after=plan.to_dict(),
        )
        _logger.info(
            "Stored nutrition plan %s for user %s (target=%s kcal, policy=%s)",
            record.id,
            user_id,
            plan.target_calories,
            self.options.calorie_policy,
        )
        return record

    def get_current_plan(self, user_id: UUID) -> PlanRecord:
        """Return the user's current plan or raise if there is none."""
        record = self.repository.get_current_plan(user_id)
        if record is None:
            raise PlanNotFoundError(f"No nutrition plan for user {user_id}")
        return record
