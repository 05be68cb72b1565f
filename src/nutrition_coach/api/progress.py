"""Progress and weight prediction endpoints."""

from dataclasses import asdict

from fastapi import APIRouter, Depends

from nutrition_coach.api.deps import current_user, get_container
from nutrition_coach.containers import AppContainer
from nutrition_coach.domain.models import UserRecord
from nutrition_coach.domain.stats import DailyTotals, PeriodSummary

router = APIRouter(prefix="", tags=["progress"])


@router.get("/progress/today")
async def progress_today(
    user: UserRecord = Depends(current_user),
    state_container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Today's intake against the current plan."""
    plan = state_container.plan_service.get_current_plan(user.id)
    progress = state_container.progress_service.get_today(
        user.id, user.timezone, plan.plan
    )
    return {
        "totals": _serialize_day(progress.totals),
        "goals": {
            "calories": asdict(progress.calories),
            "protein": asdict(progress.protein),
            "carbs": asdict(progress.carbs),
            "fats": asdict(progress.fats),
            "water": asdict(progress.water),
        },
    }


@router.get("/progress/week")
async def progress_week(
    user: UserRecord = Depends(current_user),
    state_container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Daily totals and averages for the current week."""
    summary = state_container.progress_service.get_week(user.id, user.timezone)
    return _serialize_period(summary)


@router.get("/progress/month")
async def progress_month(
    user: UserRecord = Depends(current_user),
    state_container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Daily totals and averages for the calendar month."""
    summary = state_container.progress_service.get_month(user.id, user.timezone)
    return _serialize_period(summary)


@router.post("/predictions")
async def weight_predictions(
    user: UserRecord = Depends(current_user),
    state_container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Forecast daily weight through day 31 of the plan."""
    forecast = await state_container.prediction_service.forecast(
        user.id, user.timezone
    )
    return {
        "predictions": [
            {"date": item.date.isoformat(), "weight": item.weight}
            for item in forecast.predictions
        ],
        "on_track": forecast.on_track,
        "motivational_message": forecast.motivational_message,
    }


def _serialize_day(totals: DailyTotals) -> dict[str, object]:
    return {
        "day": totals.day.isoformat(),
        "calories": totals.calories,
        "protein": totals.protein,
        "carbs": totals.carbs,
        "fats": totals.fats,
        "water_ml": totals.water_ml,
    }


def _serialize_period(summary: PeriodSummary) -> dict[str, object]:
    return {
        "daily": [_serialize_day(day) for day in summary.daily],
        "averages": {
            "calories": summary.avg_calories,
            "protein": summary.avg_protein,
            "carbs": summary.avg_carbs,
            "fats": summary.avg_fats,
            "water_ml": summary.avg_water_ml,
        },
    }
