"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest

from nutrition_coach.adapters.fdc_client import FdcClient
from nutrition_coach.config import Settings
from nutrition_coach.containers import AppContainer
from nutrition_coach.domain.logs import FoodLogEntry, WaterLogEntry, WeightLogEntry
from nutrition_coach.domain.models import ProfileRecord, UserRecord
from nutrition_coach.domain.nutrition import NutrientProfile
from nutrition_coach.domain.plan import NutritionPlan, PlanOptions, PlanRecord
from nutrition_coach.domain.profile import UserProfileInput
from nutrition_coach.services.audit import AuditEvent, AuditRepository, AuditService
from nutrition_coach.services.cache import InMemoryCache
from nutrition_coach.services.food_logs import FoodLogRepository, FoodLogService
from nutrition_coach.services.food_lookup import FoodLookupService
from nutrition_coach.services.plans import NutritionPlanService, PlanRepository
from nutrition_coach.services.predictions import (
    PredictionClient,
    WeightPredictionService,
)
from nutrition_coach.services.progress import ProgressService
from nutrition_coach.services.users import ProfileService, UserRepository, UserService
from nutrition_coach.services.water_logs import WaterLogRepository, WaterLogService
from nutrition_coach.services.weight_logs import WeightLogRepository, WeightLogService


def make_profile(**overrides: object) -> UserProfileInput:
    """A valid onboarding profile with optional overrides."""
    values: dict[str, object] = {
        "age": 30,
        "gender": "male",
        "height": "180",
        "height_unit": "cm",
        "weight": "80",
        "weight_unit": "kg",
        "activity_level": "moderately-active",
        "primary_goal": "weight-loss",
        "target_weight": "75",
        "timeline": "moderate",
    }
    values.update(overrides)
    return UserProfileInput(**values)  # type: ignore[arg-type]


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user and profile repository for tests."""

    users: dict[str, UserRecord] = field(default_factory=dict)
    profiles: dict[UUID, ProfileRecord] = field(default_factory=dict)
    touched: list[UUID] = field(default_factory=list)

    def get_by_auth_id(self, auth_user_id: str) -> UserRecord | None:
        return self.users.get(auth_user_id)

    def create_user(self, auth_user_id: str) -> UserRecord:
        user = UserRecord(id=uuid4(), auth_user_id=auth_user_id)
        self.users[auth_user_id] = user
        return user

    def touch_last_active(self, user_id: UUID) -> None:
        self.touched.append(user_id)

    def set_timezone(self, user_id: UUID, timezone: str) -> None:
        for key, user in self.users.items():
            if user.id == user_id:
                self.users[key] = UserRecord(
                    id=user.id, auth_user_id=user.auth_user_id, timezone=timezone
                )

    def get_profile(self, user_id: UUID) -> ProfileRecord | None:
        return self.profiles.get(user_id)

    def save_profile(self, user_id: UUID, profile: UserProfileInput) -> ProfileRecord:
        record = ProfileRecord(
            user_id=user_id, profile=profile, updated_at=datetime.now(tz=UTC)
        )
        self.profiles[user_id] = record
        return record


@dataclass
class InMemoryPlanRepository(PlanRepository):
    """In-memory plan repository keeping one plan per user."""

    plans: dict[UUID, PlanRecord] = field(default_factory=dict)
    created_at: datetime | None = None

    def get_current_plan(self, user_id: UUID) -> PlanRecord | None:
        return self.plans.get(user_id)

    def replace_plan(self, user_id: UUID, plan: NutritionPlan) -> PlanRecord:
        record = PlanRecord(
            id=uuid4(),
            user_id=user_id,
            plan=plan,
            created_at=self.created_at or datetime.now(tz=UTC),
        )
        self.plans[user_id] = record
        return record


@dataclass
class InMemoryFoodLogRepository(FoodLogRepository):
    """In-memory food log repository for tests."""

    logs: list[FoodLogEntry] = field(default_factory=list)

    def create_food_log(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        nutrients: NutrientProfile,
        portion: str,
        meal_type: str,
        logged_at: datetime,
        fdc_id: int | None,
    ) -> FoodLogEntry:
        entry = FoodLogEntry(
            id=uuid4(),
            user_id=user_id,
            name=name,
            calories=nutrients.calories,
            protein=nutrients.protein_g,
            carbs=nutrients.carbs_g,
            fats=nutrients.fats_g,
            portion=portion,
            meal_type=meal_type,
            logged_at=logged_at,
            fdc_id=fdc_id,
        )
        self.logs.append(entry)
        return entry

    def list_food_logs(
        self, user_id: UUID, start: datetime | None = None, end: datetime | None = None
    ) -> list[FoodLogEntry]:
        return sorted(
            (
                log
                for log in self.logs
                if log.user_id == user_id
                and (start is None or log.logged_at >= start)
                and (end is None or log.logged_at < end)
            ),
            key=lambda log: log.logged_at,
        )

    def delete_food_log(self, user_id: UUID, food_log_id: UUID) -> bool:
        for log in self.logs:
            if log.id == food_log_id and log.user_id == user_id:
                self.logs.remove(log)
                return True
        return False


@dataclass
class InMemoryWaterLogRepository(WaterLogRepository):
    """In-memory water log repository for tests."""

    logs: list[WaterLogEntry] = field(default_factory=list)

    def create_water_log(
        self, user_id: UUID, amount_ml: int, logged_at: datetime
    ) -> WaterLogEntry:
        entry = WaterLogEntry(
            id=uuid4(), user_id=user_id, amount_ml=amount_ml, logged_at=logged_at
        )
        self.logs.append(entry)
        return entry

    def list_water_logs(
        self, user_id: UUID, start: datetime | None = None, end: datetime | None = None
    ) -> list[WaterLogEntry]:
        return sorted(
            (
                log
                for log in self.logs
                if log.user_id == user_id
                and (start is None or log.logged_at >= start)
                and (end is None or log.logged_at < end)
            ),
            key=lambda log: log.logged_at,
        )


@dataclass
class InMemoryWeightLogRepository(WeightLogRepository):
    """In-memory weight log repository, one entry per user and date."""

    logs: dict[tuple[UUID, date], WeightLogEntry] = field(default_factory=dict)

    def upsert_weight_log(  # noqa: PLR0913
        self,
        user_id: UUID,
        weight: float,
        weight_unit: str,
        logged_date: date,
        notes: str | None,
    ) -> WeightLogEntry:
        existing = self.logs.get((user_id, logged_date))
        entry = WeightLogEntry(
            id=existing.id if existing else uuid4(),
            user_id=user_id,
            weight=weight,
            weight_unit=weight_unit,
            logged_date=logged_date,
            notes=notes,
        )
        self.logs[(user_id, logged_date)] = entry
        return entry

    def list_weight_logs(self, user_id: UUID) -> list[WeightLogEntry]:
        return sorted(
            (log for (owner, _), log in self.logs.items() if owner == user_id),
            key=lambda log: log.logged_date,
        )


@dataclass
class InMemoryAuditRepository(AuditRepository):
    """In-memory audit repository for tests."""

    events: list[dict[str, object]] = field(default_factory=list)

    def add_event(self, event: AuditEvent) -> None:
        self.events.append(event.to_row())

    def list_events(
        self, user_id: UUID, entity_type: str, limit: int
    ) -> list[dict[str, object]]:
        matching = [
            {key: value for key, value in event.items() if key != "user_id"}
            for event in self.events
            if event["user_id"] == str(user_id) and event["entity_type"] == entity_type
        ]
        return list(reversed(matching))[:limit]


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with in-memory responses."""

    search_calls: int = 0
    food_calls: int = 0
    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [
                {
                    "fdcId": 171077,
                    "description": "Chicken, broiler or fryers, breast, raw",
                    "dataType": "SR Legacy",
                },
                {
                    "fdcId": 123456,
                    "description": "Chicken Breast",
                    "brandOwner": "Costco",
                    "brandName": "Kirkland",
                    "dataType": "Branded",
                },
            ]
        }
    )
    food_payload: dict[str, object] = field(
        default_factory=lambda: {
            "fdcId": 171077,
            "description": "Chicken, broiler or fryers, breast, raw",
            "dataType": "SR Legacy",
            "servingSize": 100,
            "servingSizeUnit": "g",
            "foodNutrients": [
                {"nutrient": {"id": 1008}, "amount": 165},
                {"nutrient": {"id": 1003}, "amount": 31},
                {"nutrient": {"id": 1004}, "amount": 3.6},
                {"nutrient": {"id": 1005}, "amount": 0},
                {"nutrientId": 1093, "value": 74},
            ],
        }
    )

    async def search_foods(self, query: str, page_size: int = 5) -> dict[str, object]:
        self.search_calls += 1
        return self.search_payload

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        self.food_calls += 1
        return self.food_payload


@dataclass
class FakePredictionClient(PredictionClient):
    """Fake LLM client returning queued replies and recording prompts."""

    replies: list[str] = field(default_factory=list)
    prompts: list[str] = field(default_factory=list)

    async def generate(
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
    ) -> str:
        self.prompts.append(prompt)
        return self.replies.pop(0) if self.replies else "Keep going!"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        openai_api_key="openai-key",
        fdc_api_key="fdc-key",
    )


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def plan_repository() -> InMemoryPlanRepository:
    return InMemoryPlanRepository()


@pytest.fixture
def audit_repository() -> InMemoryAuditRepository:
    return InMemoryAuditRepository()


@pytest.fixture
def food_log_repository() -> InMemoryFoodLogRepository:
    return InMemoryFoodLogRepository()


@pytest.fixture
def water_log_repository() -> InMemoryWaterLogRepository:
    return InMemoryWaterLogRepository()


@pytest.fixture
def weight_log_repository() -> InMemoryWeightLogRepository:
    return InMemoryWeightLogRepository()


@pytest.fixture
def prediction_client() -> FakePredictionClient:
    return FakePredictionClient()


@pytest.fixture
def plan_service(
    plan_repository: InMemoryPlanRepository,
    audit_repository: InMemoryAuditRepository,
) -> NutritionPlanService:
    return NutritionPlanService(
        repository=plan_repository,
        audit_service=AuditService(audit_repository),
        options=PlanOptions(),
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    user_repository: InMemoryUserRepository,
    plan_repository: InMemoryPlanRepository,
    audit_repository: InMemoryAuditRepository,
    food_log_repository: InMemoryFoodLogRepository,
    water_log_repository: InMemoryWaterLogRepository,
    weight_log_repository: InMemoryWeightLogRepository,
    prediction_client: FakePredictionClient,
    plan_service: NutritionPlanService,
) -> AppContainer:
    audit_service = plan_service.audit_service
    food_lookup = FoodLookupService(fdc_client=FakeFdcClient(), cache=InMemoryCache())
    prediction_service = WeightPredictionService(
        client=prediction_client,
        model=settings.openai_model,
        reasoning_effort=settings.openai_reasoning_effort,
        store=settings.openai_store,
        users=user_repository,
        plans=plan_repository,
        food_logs=food_log_repository,
        water_logs=water_log_repository,
        weight_logs=weight_log_repository,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        user_service=UserService(user_repository),
        profile_service=ProfileService(
            repository=user_repository,
            plan_service=plan_service,
            audit_service=audit_service,
        ),
        plan_service=plan_service,
        audit_service=audit_service,
        food_lookup=food_lookup,
        food_log_service=FoodLogService(
            food_lookup=food_lookup, repository=food_log_repository
        ),
        water_log_service=WaterLogService(water_log_repository),
        weight_log_service=WeightLogService(weight_log_repository),
        progress_service=ProgressService(
            food_logs=food_log_repository, water_logs=water_log_repository
        ),
        prediction_service=prediction_service,
        close_resources=close_resources,
    )
