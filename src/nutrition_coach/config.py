"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from nutrition_coach.domain.plan import PlanOptions

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    openai_api_key: str
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str = "medium"
    openai_store: bool = False
    fdc_api_key: str = "DEMO_KEY"
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    fdc_debug: bool = False
    food_search_cache_seconds: int = 3600
    food_details_cache_seconds: int = 86400
    calorie_policy: str = "activity-deficit"
    water_variant: str = "extended"
    carb_mode: str = "floor"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def plan_options(self) -> PlanOptions:
        """Calculator strategy selectors; unknown values use defaults."""
        return PlanOptions.resolve(
            calorie_policy=self.calorie_policy,
            water_variant=self.water_variant,
            carb_mode=self.carb_mode,
        )
