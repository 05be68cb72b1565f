"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrition_coach.adapters.fdc_client import HttpxFdcClient
from nutrition_coach.adapters.openai_prediction_client import OpenAIPredictionClient
from nutrition_coach.adapters.supabase_audit_repository import SupabaseAuditRepository
from nutrition_coach.adapters.supabase_food_log_repository import (
    SupabaseFoodLogRepository,
)
from nutrition_coach.adapters.supabase_plan_repository import SupabasePlanRepository
from nutrition_coach.adapters.supabase_user_repository import SupabaseUserRepository
from nutrition_coach.adapters.supabase_water_log_repository import (
    SupabaseWaterLogRepository,
)
from nutrition_coach.adapters.supabase_weight_log_repository import (
    SupabaseWeightLogRepository,
)
from nutrition_coach.config import Settings
from nutrition_coach.services.audit import AuditService
from nutrition_coach.services.cache import InMemoryCache
from nutrition_coach.services.food_logs import FoodLogService
from nutrition_coach.services.food_lookup import FoodLookupService
from nutrition_coach.services.plans import NutritionPlanService
from nutrition_coach.services.predictions import WeightPredictionService
from nutrition_coach.services.progress import ProgressService
from nutrition_coach.services.users import ProfileService, UserService
from nutrition_coach.services.water_logs import WaterLogService
from nutrition_coach.services.weight_logs import WeightLogService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    profile_service: ProfileService
    plan_service: NutritionPlanService
    audit_service: AuditService
    food_lookup: FoodLookupService
    food_log_service: FoodLogService
    water_log_service: WaterLogService
    weight_log_service: WeightLogService
    progress_service: ProgressService
    prediction_service: WeightPredictionService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_repository = SupabaseUserRepository(supabase_client)
    plan_repository = SupabasePlanRepository(supabase_client)
    food_log_repository = SupabaseFoodLogRepository(supabase_client)
    water_log_repository = SupabaseWaterLogRepository(supabase_client)
    weight_log_repository = SupabaseWeightLogRepository(supabase_client)
    audit_service = AuditService(SupabaseAuditRepository(supabase_client))

    plan_service = NutritionPlanService(
        repository=plan_repository,
        audit_service=audit_service,
        options=resolved_settings.plan_options(),
    )
    profile_service = ProfileService(
        repository=user_repository,
        plan_service=plan_service,
        audit_service=audit_service,
    )
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
    )
    food_lookup = FoodLookupService(
        fdc_client=fdc_client,
        cache=InMemoryCache(),
        debug=resolved_settings.fdc_debug,
        search_ttl_seconds=resolved_settings.food_search_cache_seconds,
        food_ttl_seconds=resolved_settings.food_details_cache_seconds,
    )
    prediction_service = WeightPredictionService(
        client=OpenAIPredictionClient.create(resolved_settings.openai_api_key),
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
        users=user_repository,
        plans=plan_repository,
        food_logs=food_log_repository,
        water_logs=water_log_repository,
        weight_logs=weight_log_repository,
    )

    async def close_resources() -> None:
        await fdc_client.close()

    return AppContainer(
        settings=resolved_settings,
        user_service=UserService(user_repository),
        profile_service=profile_service,
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
