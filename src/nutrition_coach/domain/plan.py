"""Nutrition plan domain models."""

import math
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from uuid import UUID

ACTIVITY_DEFICIT = "activity-deficit"
WEIGHT_DELTA = "weight-delta"
CALORIE_POLICIES = (ACTIVITY_DEFICIT, WEIGHT_DELTA)

WATER_EXTENDED = "extended"
WATER_SIMPLIFIED = "simplified"
WATER_VARIANTS = (WATER_EXTENDED, WATER_SIMPLIFIED)

CARB_FLOOR = "floor"
CARB_CLAMP_GRAMS = "clamp-grams"
CARB_MODES = (CARB_FLOOR, CARB_CLAMP_GRAMS)

# Integer when the inputs parsed, NaN otherwise.
PlanNumber = int | float


@dataclass(frozen=True)
class PlanOptions:
    """Strategy selectors for the plan calculator."""

    calorie_policy: str = ACTIVITY_DEFICIT
    water_variant: str = WATER_EXTENDED
    carb_mode: str = CARB_FLOOR

    @classmethod
    def resolve(
        cls,
        calorie_policy: str | None = None,
        water_variant: str | None = None,
        carb_mode: str | None = None,
    ) -> "PlanOptions":
        """Build options, falling back to defaults for unknown selectors."""
        defaults = cls()
        return cls(
            calorie_policy=_pick(
                calorie_policy, CALORIE_POLICIES, defaults.calorie_policy
            ),
            water_variant=_pick(water_variant, WATER_VARIANTS, defaults.water_variant),
            carb_mode=_pick(carb_mode, CARB_MODES, defaults.carb_mode),
        )


def _pick(value: str | None, allowed: tuple[str, ...], default: str) -> str:
    if value is None:
        return default
    cleaned = value.strip().lower()
    return cleaned if cleaned in allowed else default


@dataclass(frozen=True)
class NutritionPlan:
    """Daily calorie, macro and water prescription."""

    bmr: PlanNumber
    tdee: PlanNumber
    target_calories: PlanNumber
    protein_grams: PlanNumber
    carbs_grams: PlanNumber
    fats_grams: PlanNumber
    protein_calories: PlanNumber
    carbs_calories: PlanNumber
    fats_calories: PlanNumber
    protein_percentage: PlanNumber
    carbs_percentage: PlanNumber
    fats_percentage: PlanNumber
    water_target: PlanNumber

    def invalid_fields(self) -> tuple[str, ...]:
        """Return the names of fields that are not finite numbers."""
        return tuple(
            item.name
            for item in fields(self)
            if not math.isfinite(getattr(self, item.name))
        )

    @property
    def is_complete(self) -> bool:
        """True when every field holds a finite value."""
        return not self.invalid_fields()

    def to_dict(self) -> dict[str, PlanNumber]:
        """Return the plan as a flat dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, row: dict[str, object]) -> "NutritionPlan":
        """Build a plan from a persisted row."""
        values = {}
        for item in fields(cls):
            raw = row.get(item.name)
            if isinstance(raw, int | float) and math.isfinite(raw):
                values[item.name] = int(raw)
            else:
                values[item.name] = math.nan
        return cls(**values)


@dataclass(frozen=True)
class PlanResult:
    """Outcome of a plan calculation at the service boundary."""

    plan: NutritionPlan
    invalid_fields: tuple[str, ...] = field(default=())

    @property
    def ok(self) -> bool:
        """True when the plan can be stored."""
        return not self.invalid_fields


@dataclass(frozen=True)
class PlanRecord:
    """A stored nutrition plan owned by a user."""

    id: UUID
    user_id: UUID
    plan: NutritionPlan
    created_at: datetime
