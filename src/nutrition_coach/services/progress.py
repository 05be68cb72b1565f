"""Progress analytics over food and water logs."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from uuid import UUID
from zoneinfo import ZoneInfo

from nutrition_coach.domain.logs import FoodLogEntry, WaterLogEntry
from nutrition_coach.domain.plan import NutritionPlan
from nutrition_coach.domain.stats import (
    DailyProgress,
    DailyTotals,
    GoalProgress,
    PeriodSummary,
)
from nutrition_coach.services.food_logs import FoodLogRepository
from nutrition_coach.services.water_logs import WaterLogRepository

DECEMBER = 12


def goal_progress(current: float, target: float) -> GoalProgress:
    """Completion capped at 100% and remaining amount floored at zero."""
    percentage = min(current / target * 100, 100.0) if target > 0 else 0.0
    return GoalProgress(
        current=current,
        target=target,
        percentage=percentage,
        remaining=max(target - current, 0),
    )


@dataclass
class ProgressService:
    """Computes daily and period intake in the user's timezone."""

    food_logs: FoodLogRepository
    water_logs: WaterLogRepository

    def get_today(
        self, user_id: UUID, timezone_name: str, plan: NutritionPlan
    ) -> DailyProgress:
        """Return today's totals with completion against the plan."""
        tz = ZoneInfo(timezone_name)
        start = _start_of_day(datetime.now(tz=tz))
        totals = self._aggregate(user_id, start, 1, tz)[0]
        return DailyProgress(
            totals=totals,
            calories=goal_progress(totals.calories, plan.target_calories),
            protein=goal_progress(totals.protein, plan.protein_grams),
            carbs=goal_progress(totals.carbs, plan.carbs_grams),
            fats=goal_progress(totals.fats, plan.fats_grams),
            water=goal_progress(totals.water_ml, plan.water_target),
        )

    def get_week(self, user_id: UUID, timezone_name: str) -> PeriodSummary:
        """Return the current Monday-start week; averages span all seven days."""
        tz = ZoneInfo(timezone_name)
        now = datetime.now(tz=tz)
        start = _start_of_day(now - timedelta(days=now.weekday()))
        return _summarize(self._aggregate(user_id, start, 7, tz))

    def get_month(self, user_id: UUID, timezone_name: str) -> PeriodSummary:
        """Return the calendar month; averages span every day of the month."""
        tz = ZoneInfo(timezone_name)
        start = _start_of_day(datetime.now(tz=tz)).replace(day=1)
        if start.month == DECEMBER:
            end = start.replace(year=start.year + 1, month=1)
        else:
            end = start.replace(month=start.month + 1)
        return _summarize(self._aggregate(user_id, start, (end - start).days, tz))

    def _aggregate(
        self, user_id: UUID, start: datetime, days: int, tz: ZoneInfo
    ) -> list[DailyTotals]:
        end = start + timedelta(days=days)
        foods = self.food_logs.list_food_logs(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )
        water = self.water_logs.list_water_logs(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )
        by_day = group_by_day(foods, water, tz)
        result = []
        for offset in range(days):
            day = (start + timedelta(days=offset)).date()
            result.append(by_day.get(day) or _empty(day))
        return result


def group_by_day(
    foods: list[FoodLogEntry], water: list[WaterLogEntry], tz: ZoneInfo
) -> dict[date, DailyTotals]:
    """Sum food and water logs per local calendar day."""
    days: dict[date, DailyTotals] = {}
    for log in foods:
        day = log.logged_at.astimezone(tz).date()
        current = days.get(day) or _empty(day)
        days[day] = DailyTotals(
            day=day,
            calories=current.calories + log.calories,
            protein=current.protein + log.protein,
            carbs=current.carbs + log.carbs,
            fats=current.fats + log.fats,
            water_ml=current.water_ml,
            logged_food=True,
            logged_water=current.logged_water,
        )
    for log in water:
        day = log.logged_at.astimezone(tz).date()
        current = days.get(day) or _empty(day)
        days[day] = DailyTotals(
            day=day,
            calories=current.calories,
            protein=current.protein,
            carbs=current.carbs,
            fats=current.fats,
            water_ml=current.water_ml + log.amount_ml,
            logged_food=current.logged_food,
            logged_water=True,
        )
    return days


def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _empty(day: date) -> DailyTotals:
    return DailyTotals(day=day, calories=0, protein=0, carbs=0, fats=0, water_ml=0)


def _summarize(daily: list[DailyTotals]) -> PeriodSummary:
    total_days = max(len(daily), 1)
    return PeriodSummary(
        daily=daily,
        avg_calories=sum(entry.calories for entry in daily) / total_days,
        avg_protein=sum(entry.protein for entry in daily) / total_days,
        avg_carbs=sum(entry.carbs for entry in daily) / total_days,
        avg_fats=sum(entry.fats for entry in daily) / total_days,
        avg_water_ml=sum(entry.water_ml for entry in daily) / total_days,
    )
