"""Tests for food logging."""

import asyncio
from datetime import UTC, datetime
from uuid import uuid4

from nutrition_coach.domain.nutrition import NutrientProfile
from nutrition_coach.services.cache import InMemoryCache
from nutrition_coach.services.food_logs import FoodLogService
from nutrition_coach.services.food_lookup import FoodLookupService
from tests.conftest import FakeFdcClient, InMemoryFoodLogRepository


def _service() -> tuple[FoodLogService, InMemoryFoodLogRepository]:
    repository = InMemoryFoodLogRepository()
    lookup = FoodLookupService(FakeFdcClient(), InMemoryCache())
    return FoodLogService(food_lookup=lookup, repository=repository), repository


def test_log_food_scales_portion() -> None:
    service, repository = _service()
    user_id = uuid4()

    entry = asyncio.run(service.log_food(user_id, 171077, 200, "Lunch"))

    assert entry.name == "Chicken, broiler or fryers, breast"
    assert entry.calories == 330
    assert entry.protein == 62
    assert entry.portion == "200g"
    assert entry.meal_type == "lunch"
    assert entry.fdc_id == 171077
    assert repository.logs == [entry]


def test_log_manual_normalizes_meal_type() -> None:
    service, _ = _service()
    user_id = uuid4()

    snack = service.log_manual(
        user_id,
        name="Protein bar",
        nutrients=NutrientProfile(calories=210, protein_g=20, carbs_g=22, fats_g=7),
        portion="1 bar",
        meal_type="snack",
    )
    unknown = service.log_manual(
        user_id,
        name="  ",
        nutrients=NutrientProfile(calories=50, protein_g=0, carbs_g=12, fats_g=0),
        portion="1 cup",
        meal_type="brunch",
    )

    assert snack.meal_type == "snacks"
    assert snack.fdc_id is None
    assert unknown.meal_type == "snacks"
    assert unknown.name == "Food"


def test_list_day_uses_local_calendar_day() -> None:
    service, _ = _service()
    user_id = uuid4()
    nutrients = NutrientProfile(calories=100, protein_g=1, carbs_g=1, fats_g=1)
    # 23:30 UTC on Jan 1 is already Jan 2 in Berlin
    late = datetime(2026, 1, 1, 23, 30, tzinfo=UTC)
    early = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
    service.log_manual(user_id, "late", nutrients, "1", "dinner", logged_at=late)
    service.log_manual(user_id, "early", nutrients, "1", "lunch", logged_at=early)

    berlin = service.list_day(
        user_id, datetime(2026, 1, 2, 9, tzinfo=UTC), "Europe/Berlin"
    )
    utc = service.list_day(user_id, datetime(2026, 1, 1, 9, tzinfo=UTC), "UTC")

    assert [entry.name for entry in berlin] == ["late"]
    assert [entry.name for entry in utc] == ["early", "late"]


def test_delete_only_owned_logs() -> None:
    service, repository = _service()
    owner = uuid4()
    entry = service.log_manual(
        owner,
        "Apple",
        NutrientProfile(calories=52, protein_g=0.3, carbs_g=14, fats_g=0.2),
        "1 medium",
        "snacks",
    )

    assert service.delete(uuid4(), entry.id) is False
    assert service.delete(owner, entry.id) is True
    assert repository.logs == []
