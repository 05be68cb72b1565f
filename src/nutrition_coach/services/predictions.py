"""Weight trajectory prediction using an LLM."""

import json
import logging
import math
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from nutrition_coach.domain.logs import FoodLogEntry, WaterLogEntry, WeightLogEntry
from nutrition_coach.domain.plan import PlanRecord
from nutrition_coach.domain.prediction import (
    AdherenceSummary,
    NumberedDay,
    WeightForecast,
    WeightPrediction,
)
from nutrition_coach.domain.profile import UserProfileInput
from nutrition_coach.errors import (
    PlanNotFoundError,
    PredictionFormatError,
    PredictionUnavailableError,
    ProfileNotFoundError,
)
from nutrition_coach.services.food_logs import FoodLogRepository
from nutrition_coach.services.plan_calculator import parse_decimal
from nutrition_coach.services.plans import PlanRepository
from nutrition_coach.services.progress import group_by_day
from nutrition_coach.services.users import UserRepository
from nutrition_coach.services.water_logs import WaterLogRepository
from nutrition_coach.services.weight_logs import WeightLogRepository

PREDICTION_HORIZON_DAYS = 31
MAINTENANCE_TOLERANCE = 2

_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")
_logger = logging.getLogger(__name__)


class PredictionClient(Protocol):
    """Interface for LLM text generation."""

    async def generate(
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
    ) -> str:
        """Return the model's text reply for a prompt."""


@dataclass(frozen=True)
class PredictionData:
    """Everything the prediction prompt is built from."""

    profile: UserProfileInput
    plan: PlanRecord
    food_logs: list[FoodLogEntry]
    water_logs: list[WaterLogEntry]
    weight_logs: list[WeightLogEntry]
    timezone: str = "UTC"

    @property
    def plan_start(self) -> date:
        """Local calendar date the plan was created."""
        return self.plan.created_at.astimezone(ZoneInfo(self.timezone)).date()


def daily_breakdown(
    data: PredictionData,
) -> tuple[list[NumberedDay], AdherenceSummary]:
    """Per-day intake numbered from plan creation, plus adherence summary."""
    by_day = group_by_day(data.food_logs, data.water_logs, ZoneInfo(data.timezone))
    days = [
        NumberedDay(day_number=(day - data.plan_start).days, totals=totals)
        for day, totals in sorted(by_day.items())
    ]
    total_days = len(days)
    avg_calories = (
        sum(entry.totals.calories for entry in days) / total_days if total_days else 0
    )
    target = data.plan.plan.target_calories
    adherence = avg_calories / target * 100 if avg_calories > 0 and target else 0.0
    summary = AdherenceSummary(
        total_logged_days=total_days,
        days_with_food=sum(1 for entry in days if entry.totals.logged_food),
        days_with_water=sum(1 for entry in days if entry.totals.logged_water),
        avg_calories=math.floor(avg_calories + 0.5),
        calorie_adherence=math.floor(adherence * 10 + 0.5) / 10,
    )
    return days, summary


def dates_to_predict(data: PredictionData) -> list[date]:
    """Dates from the day after the last weigh-in through day 31."""
    start_day = 0
    if data.weight_logs:
        last = data.weight_logs[-1].logged_date
        start_day = (last - data.plan_start).days + 1
    return [
        data.plan_start + timedelta(days=day)
        for day in range(start_day, PREDICTION_HORIZON_DAYS + 1)
    ]


def build_prediction_prompt(data: PredictionData) -> str:
    """Render the prediction prompt from profile, plan and history."""
    days, summary = daily_breakdown(data)
    plan = data.plan.plan
    profile = data.profile
    targets = dates_to_predict(data)
    last_weight = data.weight_logs[-1] if data.weight_logs else None
    current_weight = (
        f"{last_weight.weight:g} {last_weight.weight_unit}"
        if last_weight
        else "Not logged yet"
    )

    if days:
        intake_lines = "\n".join(_format_day(entry) for entry in days)
    else:
        intake_lines = "No nutrition data logged yet"
    weight_lines = "\n".join(
        f"Day {(log.logged_date - data.plan_start).days}: "
        f"{log.weight:g} {log.weight_unit}"
        for log in data.weight_logs
    )
    date_lines = "\n".join(day.isoformat() for day in targets)
    baseline = f"{last_weight.weight:g}" if last_weight else profile.weight

    return f"""You are a nutrition and weight tracking expert. Predict the daily \
weight progression for a user from their profile, plan and logged history.

USER PROFILE:
- Age: {profile.age}, Gender: {profile.gender}
- Height: {profile.height} {profile.height_unit}
- Starting Weight: {profile.weight} {profile.weight_unit}
- Current Weight: {current_weight}
- Target Weight: {profile.target_weight or "n/a"} {profile.weight_unit}
- Activity Level: {profile.activity_level}
- Primary Goal: {profile.primary_goal}

NUTRITION PLAN TARGETS:
- BMR: {plan.bmr} calories
- TDEE: {plan.tdee} calories
- Target Daily Calories: {plan.target_calories}
- Target Protein: {plan.protein_grams}g
- Target Carbs: {plan.carbs_grams}g
- Target Fats: {plan.fats_grams}g
- Target Water: {plan.water_target}ml

ACTUAL DAILY NUTRITION INTAKE:
{intake_lines}

SUMMARY STATISTICS:
- Average Daily Calories: {summary.avg_calories} \
({summary.calorie_adherence}% of target)
- Days with food logs: {summary.days_with_food}
- Days with water logs: {summary.days_with_water}
- Total logged days: {summary.total_logged_days}

WEIGHT HISTORY:
{weight_lines or "No weigh-ins yet"}

EXACT DATES TO PREDICT (one prediction per date):
{date_lines}

Consider calorie intake against target, the correlation between intake and \
weight change, the goal ({profile.primary_goal}), realistic rates of change \
for the actual deficit or surplus, and treat days without logs as maintenance.

Respond with ONLY a JSON array containing exactly {len(targets)} predictions:
[
  {{"date": "YYYY-MM-DD", "weight": number}}
]
Start from {baseline} {profile.weight_unit} as the baseline.
"""


def build_motivation_prompt(
    profile: UserProfileInput, final: WeightPrediction | None, on_track: bool
) -> str:
    """Render the prompt for a short coaching message."""
    predicted = f"{final.weight:.1f}" if final else "N/A"
    guidance = (
        "Tell them they are on track, congratulate them and encourage them to "
        "keep this pace."
        if on_track
        else "Encourage them to work harder so they reach their goal in time."
    )
    return (
        "You are a motivational fitness coach. Write a motivational message of "
        "at most 2-3 sentences.\n\n"
        f"Primary goal: {profile.primary_goal}\n"
        f"Target weight: {profile.target_weight or 'n/a'} {profile.weight_unit}\n"
        f"Predicted weight on day {PREDICTION_HORIZON_DAYS}: "
        f"{predicted} {profile.weight_unit}\n"
        f"On track: {'Yes' if on_track else 'No'}\n\n"
        f"{guidance}"
    )


def parse_predictions(text: str) -> list[WeightPrediction]:
    """Extract valid predictions from the model's reply."""
    match = _JSON_ARRAY.search(text)
    if match is None:
        raise PredictionFormatError("No JSON array found in prediction response")
    try:
        raw = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise PredictionFormatError(f"Invalid prediction JSON: {exc}") from exc
    if not isinstance(raw, list) or not raw:
        raise PredictionFormatError("No predictions returned")

    predictions = []
    for item in raw:
        if not isinstance(item, dict) or isinstance(item.get("weight"), bool):
            continue
        if not isinstance(item.get("weight"), int | float):
            continue
        try:
            predictions.append(WeightPrediction.model_validate(item))
        except ValidationError:
            continue
    if not predictions:
        raise PredictionFormatError("No valid predictions in response")
    return predictions


def is_on_track(
    goal: str, target_weight: str, final: WeightPrediction | None
) -> bool:
    """Compare the final predicted weight with the target for the goal."""
    target = parse_decimal(target_weight)
    if final is None or math.isnan(target):
        return False
    if goal == "weight-loss":
        return final.weight <= target
    if goal == "muscle-gain":
        return final.weight >= target
    return abs(final.weight - target) < MAINTENANCE_TOLERANCE


@dataclass
class WeightPredictionService:
    """Collects a user's history and asks the model for a forecast."""

    client: PredictionClient
    model: str
    reasoning_effort: str | None
    store: bool
    users: UserRepository
    plans: PlanRepository
    food_logs: FoodLogRepository
    water_logs: WaterLogRepository
    weight_logs: WeightLogRepository

    def collect(self, user_id: UUID, timezone: str = "UTC") -> PredictionData:
        """Gather the profile, plan and every log for the user."""
        profile = self.users.get_profile(user_id)
        if profile is None:
            raise ProfileNotFoundError(f"User {user_id} has not completed onboarding")
        plan = self.plans.get_current_plan(user_id)
        if plan is None:
            raise PlanNotFoundError(f"No nutrition plan for user {user_id}")
        weights = sorted(
            self.weight_logs.list_weight_logs(user_id),
            key=lambda entry: entry.logged_date,
        )
        return PredictionData(
            profile=profile.profile,
            plan=plan,
            food_logs=self.food_logs.list_food_logs(user_id),
            water_logs=self.water_logs.list_water_logs(user_id),
            weight_logs=weights,
            timezone=timezone,
        )

    async def forecast(self, user_id: UUID, timezone: str = "UTC") -> WeightForecast:
        """Predict daily weight through day 31 and add a coaching message."""
        data = self.collect(user_id, timezone)
        if not data.weight_logs:
            raise PredictionUnavailableError(
                "Need at least one weight log to generate predictions"
            )

        text = await self._generate(build_prediction_prompt(data))
        try:
            predictions = parse_predictions(text)
        except PredictionFormatError:
            _logger.warning("Unparseable prediction response: %.500s", text)
            raise

        horizon = data.plan_start + timedelta(days=PREDICTION_HORIZON_DAYS)
        final = next((item for item in predictions if item.date == horizon), None)
        on_track = is_on_track(
            data.profile.primary_goal, data.profile.target_weight, final
        )
        message = await self._generate(
            build_motivation_prompt(data.profile, final, on_track)
        )
        _logger.info(
            "Generated %s weight predictions for user %s (on_track=%s)",
            len(predictions),
            user_id,
            on_track,
        )
        return WeightForecast(
            predictions=predictions,
            motivational_message=message.strip(),
            on_track=on_track,
        )

    async def _generate(self, prompt: str) -> str:
        return await self.client.generate(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=prompt,
        )


def _format_day(entry: NumberedDay) -> str:
    totals = entry.totals
    line = (
        f"Day {entry.day_number}: {totals.calories:g}cal, "
        f"{round(totals.protein)}g protein, {round(totals.carbs)}g carbs, "
        f"{round(totals.fats)}g fats, {round(totals.water_ml)}ml water"
    )
    if not totals.logged_food:
        line += " (no food logged)"
    if not totals.logged_water:
        line += " (no water logged)"
    return line
