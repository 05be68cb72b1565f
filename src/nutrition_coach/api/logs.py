"""Food lookup and logging endpoints."""

from datetime import UTC, date, datetime
from uuid import UUID
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Query, status

from nutrition_coach.api.deps import current_user, get_container
from nutrition_coach.api.models import FoodLogPayload, WaterLogPayload, WeightLogPayload
from nutrition_coach.containers import AppContainer
from nutrition_coach.domain.logs import FoodLogEntry, WaterLogEntry, WeightLogEntry
from nutrition_coach.domain.models import UserRecord
from nutrition_coach.domain.nutrition import FoodSummary, NutrientProfile
from nutrition_coach.services.food_lookup import calculate_portion

router = APIRouter(tags=["logs"])


@router.get("/foods/search")
async def search_foods(
    q: str = Query(min_length=1),
    limit: int = Query(default=5, ge=1, le=25),
    state_container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Search FoodData Central."""
    foods = await state_container.food_lookup.search(q, limit=limit)
    return {"foods": [_serialize_food(food) for food in foods]}


@router.get("/foods/{fdc_id}")
async def food_detail(
    fdc_id: int,
    grams: float = Query(default=100, gt=0),
    state_container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return a food's per-100 g nutrients and a scaled portion."""
    food = await state_container.food_lookup.get_food(fdc_id)
    return {
        **_serialize_food(food.summary),
        "serving_size_g": food.serving_size_g,
        "per_100g": _serialize_nutrients(food.per_100g),
        "portion": {
            "grams": grams,
            **_serialize_nutrients(calculate_portion(food.per_100g, grams)),
        },
    }


@router.post("/food-logs", status_code=status.HTTP_201_CREATED)
async def create_food_log(
    payload: FoodLogPayload,
    user: UserRecord = Depends(current_user),
    state_container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Log a food by FDC id and grams, or with manually entered values."""
    service = state_container.food_log_service
    if payload.fdc_id is not None:
        if payload.grams is None:
            raise HTTPException(
                status_code=422, detail="grams is required with fdc_id"
            )
        entry = await service.log_food(
            user.id,
            payload.fdc_id,
            payload.grams,
            payload.meal_type,
            logged_at=payload.logged_at,
        )
    else:
        if not payload.name or payload.calories is None:
            raise HTTPException(
                status_code=422,
                detail="name and calories are required for manual entries",
            )
        entry = service.log_manual(
            user.id,
            name=payload.name,
            nutrients=NutrientProfile(
                calories=payload.calories,
                protein_g=payload.protein,
                carbs_g=payload.carbs,
                fats_g=payload.fats,
            ),
            portion=payload.portion,
            meal_type=payload.meal_type,
            logged_at=payload.logged_at,
        )
    return _serialize_food_log(entry)


@router.get("/food-logs")
async def list_food_logs(
    day: date | None = None,
    user: UserRecord = Depends(current_user),
    state_container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """List food logs for a local calendar day (default today)."""
    tz = ZoneInfo(user.timezone)
    moment = (
        datetime(day.year, day.month, day.day, 12, tzinfo=tz)
        if day
        else datetime.now(tz=UTC)
    )
    entries = state_container.food_log_service.list_day(user.id, moment, user.timezone)
    return {"food_logs": [_serialize_food_log(entry) for entry in entries]}


@router.delete("/food-logs/{food_log_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_food_log(
    food_log_id: UUID,
    user: UserRecord = Depends(current_user),
    state_container: AppContainer = Depends(get_container),
) -> None:
    """Delete one of the user's food logs."""
    if not state_container.food_log_service.delete(user.id, food_log_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)


@router.post("/water-logs", status_code=status.HTTP_201_CREATED)
async def create_water_log(
    payload: WaterLogPayload,
    user: UserRecord = Depends(current_user),
    state_container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Record water intake."""
    entry = state_container.water_log_service.log(
        user.id, payload.amount_ml, payload.logged_at
    )
    return _serialize_water_log(entry)


@router.post("/weight-logs", status_code=status.HTTP_201_CREATED)
async def create_weight_log(
    payload: WeightLogPayload,
    user: UserRecord = Depends(current_user),
    state_container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Record the weight for a date; defaults to today in the user's timezone."""
    logged_date = payload.logged_date or datetime.now(tz=ZoneInfo(user.timezone)).date()
    entry = state_container.weight_log_service.log(
        user.id, payload.weight, payload.weight_unit, logged_date, payload.notes
    )
    return _serialize_weight_log(entry)


@router.get("/weight-logs")
async def list_weight_logs(
    user: UserRecord = Depends(current_user),
    state_container: AppContainer = Depends(get_container),
) -> dict[str, object]:
    """Return the user's weight history."""
    history = state_container.weight_log_service.history(user.id)
    return {"weight_logs": [_serialize_weight_log(entry) for entry in history]}


def _serialize_food(food: FoodSummary) -> dict[str, object]:
    return {
        "fdc_id": food.fdc_id,
        "name": food.display_name,
        "description": food.description,
        "source": food.source_label,
        "data_type": food.data_type,
    }


def _serialize_nutrients(nutrients: NutrientProfile) -> dict[str, float]:
    return {
        "calories": nutrients.calories,
        "protein": nutrients.protein_g,
        "carbs": nutrients.carbs_g,
        "fats": nutrients.fats_g,
        "fiber": nutrients.fiber_g,
        "sugar": nutrients.sugar_g,
        "sodium": nutrients.sodium_mg,
    }


def _serialize_food_log(entry: FoodLogEntry) -> dict[str, object]:
    return {
        "id": str(entry.id),
        "name": entry.name,
        "calories": entry.calories,
        "protein": entry.protein,
        "carbs": entry.carbs,
        "fats": entry.fats,
        "portion": entry.portion,
        "meal_type": entry.meal_type,
        "logged_at": entry.logged_at.isoformat(),
        "fdc_id": entry.fdc_id,
    }


def _serialize_water_log(entry: WaterLogEntry) -> dict[str, object]:
    return {
        "id": str(entry.id),
        "amount_ml": entry.amount_ml,
        "logged_at": entry.logged_at.isoformat(),
    }


def _serialize_weight_log(entry: WeightLogEntry) -> dict[str, object]:
    return {
        "id": str(entry.id),
        "weight": entry.weight,
        "weight_unit": entry.weight_unit,
        "logged_date": entry.logged_date.isoformat(),
        "notes": entry.notes,
    }
