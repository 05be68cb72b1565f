"""Food composition lookups against USDA FoodData Central."""

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from nutrition_coach.adapters.fdc_client import FdcClient
from nutrition_coach.domain.nutrition import FoodDetails, FoodSummary, NutrientProfile
from nutrition_coach.services.cache import Cache

_NUTRIENT_IDS = {
    "calories": 1008,
    "protein_g": 1003,
    "fats_g": 1004,
    "carbs_g": 1005,
    "fiber_g": 1079,
    "sugar_g": 2000,
    "sodium_mg": 1093,
}

_logger = logging.getLogger(__name__)


@dataclass
class FoodLookupService:
    """Searches foods and resolves per-100 g nutrients, with caching."""

    fdc_client: FdcClient
    cache: Cache
    search_ttl_seconds: int = 3600
    food_ttl_seconds: int = 86400
    debug: bool = False
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str, limit: int = 5) -> list[FoodSummary]:
        """Search FDC foods with caching."""
        cache_key = f"fdc:search:{query.strip().lower()}:{limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(query, page_size=limit),
            action="search",
        )
        foods = [_parse_summary(food) for food in payload.get("foods", [])]
        self.cache.set(cache_key, foods, ttl_seconds=self.search_ttl_seconds)
        if self.debug:
            _logger.info("FDC search: query=%s results=%s", query, len(foods))
        return foods

    async def get_food(self, fdc_id: int) -> FoodDetails:
        """Retrieve a food with its per-100 g nutrients."""
        cache_key = f"fdc:food:{fdc_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, FoodDetails):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.get_food(fdc_id),
            action=f"get_food:{fdc_id}",
        )
        details = FoodDetails(
            summary=_parse_summary(payload),
            per_100g=extract_nutrients(payload.get("foodNutrients", [])),
            serving_size_g=_serving_size_g(payload),
        )
        self.cache.set(cache_key, details, ttl_seconds=self.food_ttl_seconds)
        return details

    async def _call_with_retry(
        self, func: Callable[[], Awaitable[dict[str, object]]], *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                if self.debug:
                    _logger.warning(
                        "FDC %s failed (attempt %s/%s, status=%s): %s",
                        action,
                        attempt,
                        self.retry_attempts + 1,
                        _status_code_from_exception(exc),
                        exc,
                    )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def calculate_portion(per_100g: NutrientProfile, grams: float) -> NutrientProfile:
    """Scale per-100 g nutrients to a portion.

    Calories are rounded to whole kcal, everything else to one decimal.
    """
    factor = grams / 100
    return NutrientProfile(
        calories=float(math.floor(per_100g.calories * factor + 0.5)),
        protein_g=_round_tenth(per_100g.protein_g * factor),
        carbs_g=_round_tenth(per_100g.carbs_g * factor),
        fats_g=_round_tenth(per_100g.fats_g * factor),
        fiber_g=_round_tenth(per_100g.fiber_g * factor),
        sugar_g=_round_tenth(per_100g.sugar_g * factor),
        sodium_mg=_round_tenth(per_100g.sodium_mg * factor),
    )


def extract_nutrients(food_nutrients: list[dict[str, object]]) -> NutrientProfile:
    """Pick the tracked nutrients out of an FDC nutrient list."""
    by_id = {nutrient_id: name for name, nutrient_id in _NUTRIENT_IDS.items()}
    values = dict.fromkeys(_NUTRIENT_IDS, 0.0)
    for nutrient in food_nutrients:
        info = nutrient.get("nutrient") or {}
        nutrient_id = info.get("id") or nutrient.get("nutrientId")
        amount = nutrient.get("amount", nutrient.get("value"))
        name = by_id.get(nutrient_id)
        if name and amount is not None:
            values[name] = float(amount)
    return NutrientProfile(**values)


def _parse_summary(food: dict[str, object]) -> FoodSummary:
    return FoodSummary(
        fdc_id=int(food["fdcId"]),
        description=str(food.get("description", "")),
        brand_owner=food.get("brandOwner"),
        brand_name=food.get("brandName"),
        data_type=food.get("dataType"),
    )


def _serving_size_g(payload: dict[str, object]) -> float | None:
    size = payload.get("servingSize")
    unit = str(payload.get("servingSizeUnit") or "g").lower()
    if size is None or unit not in {"g", "gram", "grams", "grm"}:
        return None
    return float(size)


def _round_tenth(value: float) -> float:
    return math.floor(value * 10 + 0.5) / 10


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
