"""Tests for weight predictions."""

import asyncio
import json
from datetime import UTC, date, datetime, timedelta
from uuid import uuid4

import pytest

from nutrition_coach.domain.nutrition import NutrientProfile
from nutrition_coach.domain.prediction import WeightPrediction
from nutrition_coach.errors import (
    PredictionFormatError,
    PredictionUnavailableError,
    ProfileNotFoundError,
)
from nutrition_coach.services.plan_calculator import generate_nutrition_plan
from nutrition_coach.services.predictions import (
    WeightPredictionService,
    build_prediction_prompt,
    daily_breakdown,
    dates_to_predict,
    is_on_track,
    parse_predictions,
)
from tests.conftest import (
    FakePredictionClient,
    InMemoryFoodLogRepository,
    InMemoryPlanRepository,
    InMemoryUserRepository,
    InMemoryWaterLogRepository,
    InMemoryWeightLogRepository,
    make_profile,
)

PLAN_START = datetime(2026, 3, 1, 12, tzinfo=UTC)


def _service(client: FakePredictionClient) -> tuple[WeightPredictionService, dict]:
    repos = {
        "users": InMemoryUserRepository(),
        "plans": InMemoryPlanRepository(created_at=PLAN_START),
        "food_logs": InMemoryFoodLogRepository(),
        "water_logs": InMemoryWaterLogRepository(),
        "weight_logs": InMemoryWeightLogRepository(),
    }
    service = WeightPredictionService(
        client=client,
        model="gpt-5.2",
        reasoning_effort="medium",
        store=False,
        **repos,
    )
    return service, repos


def _onboard(repos: dict, **profile_overrides: object):
    user = repos["users"].create_user("auth|predict")
    profile = make_profile(**profile_overrides)
    repos["users"].save_profile(user.id, profile)
    repos["plans"].replace_plan(user.id, generate_nutrition_plan(profile))
    return user


def _log_food(repos: dict, user_id, day_offset: int, calories: float) -> None:
    repos["food_logs"].create_food_log(
        user_id=user_id,
        name="Meal",
        nutrients=NutrientProfile(
            calories=calories, protein_g=100, carbs_g=200, fats_g=60
        ),
        portion="1 day",
        meal_type="dinner",
        logged_at=PLAN_START + timedelta(days=day_offset),
        fdc_id=None,
    )


def test_daily_breakdown_numbers_days_from_plan_start() -> None:
    service, repos = _service(FakePredictionClient())
    user = _onboard(repos)
    _log_food(repos, user.id, 0, 2000)
    _log_food(repos, user.id, 2, 2200)
    repos["water_logs"].create_water_log(
        user.id, 500, PLAN_START + timedelta(days=3)
    )

    days, summary = daily_breakdown(service.collect(user.id))

    assert [entry.day_number for entry in days] == [0, 2, 3]
    assert summary.total_logged_days == 3
    assert summary.days_with_food == 2
    assert summary.days_with_water == 1
    assert summary.avg_calories == 1400
    assert summary.calorie_adherence == round(1400 / 2259 * 100, 1)


def test_dates_to_predict_start_after_last_weigh_in() -> None:
    service, repos = _service(FakePredictionClient())
    user = _onboard(repos)

    assert len(dates_to_predict(service.collect(user.id))) == 32

    repos["weight_logs"].upsert_weight_log(user.id, 80, "kg", date(2026, 3, 5), None)
    dates = dates_to_predict(service.collect(user.id))

    assert dates[0] == date(2026, 3, 6)
    assert dates[-1] == date(2026, 4, 1)
    assert len(dates) == 27


def test_prediction_prompt_lists_history_and_dates() -> None:
    service, repos = _service(FakePredictionClient())
    user = _onboard(repos)
    _log_food(repos, user.id, 1, 1900)
    repos["weight_logs"].upsert_weight_log(user.id, 79.4, "kg", date(2026, 3, 2), None)

    prompt = build_prediction_prompt(service.collect(user.id))

    assert "Target Daily Calories: 2259" in prompt
    assert "Day 1: 1900cal" in prompt
    assert "(no water logged)" in prompt
    assert "Day 1: 79.4 kg" in prompt
    assert "2026-03-03" in prompt
    assert "exactly 30 predictions" in prompt


def test_parse_predictions_extracts_array() -> None:
    text = (
        "Here you go:\n"
        '[{"date": "2026-03-02", "weight": 79.8},'
        ' {"date": "2026-03-03", "weight": "heavy"},'
        ' {"date": "2026-03-04", "weight": true},'
        ' {"date": "not-a-date", "weight": 79.5},'
        ' {"date": "2026-03-05", "weight": 79.4}]\n'
        "Good luck!"
    )

    predictions = parse_predictions(text)

    assert predictions == [
        WeightPrediction(date=date(2026, 3, 2), weight=79.8),
        WeightPrediction(date=date(2026, 3, 5), weight=79.4),
    ]


@pytest.mark.parametrize(
    "text",
    ["no json here", "[]", "[not json]", '[{"date": "2026-03-02", "weight": -1}]'],
)
def test_parse_predictions_rejects_unusable_output(text: str) -> None:
    with pytest.raises(PredictionFormatError):
        parse_predictions(text)


def test_is_on_track() -> None:
    final = WeightPrediction(date=date(2026, 4, 1), weight=75.5)

    assert is_on_track("weight-loss", "76", final)
    assert not is_on_track("weight-loss", "75", final)
    assert is_on_track("muscle-gain", "75", final)
    assert is_on_track("maintenance", "77", final)
    assert not is_on_track("maintenance", "78", final)
    assert not is_on_track("weight-loss", "", final)
    assert not is_on_track("weight-loss", "76", None)


def test_forecast_returns_predictions_and_message() -> None:
    horizon = date(2026, 4, 1)
    reply = json.dumps(
        [
            {"date": (horizon - timedelta(days=1)).isoformat(), "weight": 75.2},
            {"date": horizon.isoformat(), "weight": 74.8},
        ]
    )
    client = FakePredictionClient(replies=[reply, "  Great pace, keep it up!  "])
    service, repos = _service(client)
    user = _onboard(repos, target_weight="75")
    repos["weight_logs"].upsert_weight_log(user.id, 79, "kg", date(2026, 3, 10), None)

    forecast = asyncio.run(service.forecast(user.id))

    assert len(forecast.predictions) == 2
    assert forecast.on_track is True
    assert forecast.motivational_message == "Great pace, keep it up!"
    assert len(client.prompts) == 2
    assert "On track: Yes" in client.prompts[1]
    assert "74.8" in client.prompts[1]


def test_forecast_without_horizon_prediction_is_off_track() -> None:
    reply = json.dumps([{"date": "2026-03-20", "weight": 70}])
    client = FakePredictionClient(replies=[reply, "Push a little harder."])
    service, repos = _service(client)
    user = _onboard(repos, target_weight="75")
    repos["weight_logs"].upsert_weight_log(user.id, 79, "kg", date(2026, 3, 10), None)

    forecast = asyncio.run(service.forecast(user.id))

    assert forecast.on_track is False
    assert "N/A" in client.prompts[1]


def test_forecast_requires_weight_logs() -> None:
    client = FakePredictionClient()
    service, repos = _service(client)
    user = _onboard(repos)

    with pytest.raises(PredictionUnavailableError):
        asyncio.run(service.forecast(user.id))
    assert client.prompts == []


def test_forecast_requires_profile() -> None:
    service, repos = _service(FakePredictionClient())
    user = repos["users"].create_user("auth|new")

    with pytest.raises(ProfileNotFoundError):
        asyncio.run(service.forecast(user.id))


def test_forecast_surfaces_format_errors() -> None:
    client = FakePredictionClient(replies=["I cannot predict that."])
    service, repos = _service(client)
    user = _onboard(repos)
    repos["weight_logs"].upsert_weight_log(user.id, 79, "kg", date(2026, 3, 10), None)

    with pytest.raises(PredictionFormatError):
        asyncio.run(service.forecast(user.id))
    assert len(client.prompts) == 1
