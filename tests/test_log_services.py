"""Tests for water and weight logging."""

from datetime import date
from uuid import uuid4

import pytest

from nutrition_coach.services.water_logs import WaterLogService
from nutrition_coach.services.weight_logs import WeightLogService
from tests.conftest import InMemoryWaterLogRepository, InMemoryWeightLogRepository


def test_water_log_records_amount() -> None:
    repository = InMemoryWaterLogRepository()
    service = WaterLogService(repository)

    entry = service.log(uuid4(), 250)

    assert entry.amount_ml == 250
    assert entry.logged_at.tzinfo is not None
    assert repository.logs == [entry]


def test_water_log_rejects_non_positive_amount() -> None:
    service = WaterLogService(InMemoryWaterLogRepository())

    with pytest.raises(ValueError):
        service.log(uuid4(), 0)


def test_weight_log_replaces_same_day_entry() -> None:
    repository = InMemoryWeightLogRepository()
    service = WeightLogService(repository)
    user_id = uuid4()

    first = service.log(user_id, 80.5, "kg", date(2026, 3, 1))
    second = service.log(user_id, 80.1, " KG ", date(2026, 3, 1), notes="after run")
    service.log(user_id, 79.9, "kg", date(2026, 2, 28))

    history = service.history(user_id)
    assert [entry.logged_date for entry in history] == [
        date(2026, 2, 28),
        date(2026, 3, 1),
    ]
    assert history[1].weight == 80.1
    assert history[1].weight_unit == "kg"
    assert second.id == first.id


def test_weight_log_validates_input() -> None:
    service = WeightLogService(InMemoryWeightLogRepository())

    with pytest.raises(ValueError):
        service.log(uuid4(), -1, "kg", date(2026, 3, 1))
    with pytest.raises(ValueError):
        service.log(uuid4(), 70, "stone", date(2026, 3, 1))
