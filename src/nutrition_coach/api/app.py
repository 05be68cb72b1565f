"""FastAPI application factory."""

import logging
import math
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse

from nutrition_coach.api.deps import current_user, get_container
from nutrition_coach.api.logs import router as logs_router
from nutrition_coach.api.models import ProfilePayload
from nutrition_coach.api.progress import router as progress_router
from nutrition_coach.app_logging import configure_logging
from nutrition_coach.containers import AppContainer
from nutrition_coach.domain.models import ProfileRecord, UserRecord
from nutrition_coach.domain.plan import NutritionPlan, PlanRecord
from nutrition_coach.errors import (
    InvalidProfileError,
    NutritionCoachError,
    PlanNotFoundError,
    PredictionFormatError,
    PredictionUnavailableError,
    ProfileNotFoundError,
)

_ERROR_STATUS: dict[type[NutritionCoachError], int] = {
    InvalidProfileError: 422,
    ProfileNotFoundError: status.HTTP_404_NOT_FOUND,
    PlanNotFoundError: status.HTTP_404_NOT_FOUND,
    PredictionUnavailableError: status.HTTP_409_CONFLICT,
    PredictionFormatError: status.HTTP_502_BAD_GATEWAY,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        try:
            await app.state.container.close_resources()
        except Exception:
            logger.exception("Failed to close application resources")

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(NutritionCoachError)
    async def domain_error_handler(
        request: Request, exc: NutritionCoachError
    ) -> JSONResponse:
        """Translate domain errors into HTTP responses."""
        status_code = _ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
        content: dict[str, object] = {"detail": str(exc)}
        if isinstance(exc, InvalidProfileError):
            content["invalid_fields"] = list(exc.invalid_fields)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc)
        return JSONResponse(status_code=status_code, content=content)

    app.include_router(logs_router)
    app.include_router(progress_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/onboarding", status_code=status.HTTP_201_CREATED)
    async def onboarding(
        payload: ProfilePayload,
        user: UserRecord = Depends(current_user),
        state_container: AppContainer = Depends(get_container),
    ) -> dict[str, object]:
        """Store questionnaire answers and return the computed plan."""
        profile, plan = state_container.profile_service.complete_onboarding(
            user.id, payload.to_profile()
        )
        if payload.timezone:
            state_container.user_service.set_timezone(user.id, payload.timezone)
        return {"profile": _serialize_profile(profile), "plan": _serialize_plan(plan)}

    @app.get("/profile")
    async def get_profile(
        user: UserRecord = Depends(current_user),
        state_container: AppContainer = Depends(get_container),
    ) -> dict[str, object]:
        """Return the stored onboarding profile."""
        profile = state_container.profile_service.get_profile(user.id)
        return _serialize_profile(profile)

    @app.put("/profile")
    async def update_profile(
        payload: ProfilePayload,
        user: UserRecord = Depends(current_user),
        state_container: AppContainer = Depends(get_container),
    ) -> dict[str, object]:
        """Edit the profile; the current plan is replaced."""
        profile, plan = state_container.profile_service.update_profile(
            user.id, payload.to_profile()
        )
        if payload.timezone:
            state_container.user_service.set_timezone(user.id, payload.timezone)
        return {"profile": _serialize_profile(profile), "plan": _serialize_plan(plan)}

    @app.get("/plan")
    async def get_plan(
        user: UserRecord = Depends(current_user),
        state_container: AppContainer = Depends(get_container),
    ) -> dict[str, object]:
        """Return the user's current nutrition plan."""
        record = state_container.plan_service.get_current_plan(user.id)
        return _serialize_plan(record)

    @app.get("/plan/history")
    async def plan_history(
        limit: int = 20,
        user: UserRecord = Depends(current_user),
        state_container: AppContainer = Depends(get_container),
    ) -> dict[str, object]:
        """Return superseded plans, newest first."""
        events = state_container.audit_service.plan_history(user.id, limit)
        return {"events": events}

    @app.post("/plan/preview")
    async def preview_plan(
        payload: ProfilePayload,
        state_container: AppContainer = Depends(get_container),
    ) -> dict[str, object]:
        """Compute a plan for the answers without storing anything."""
        result = state_container.plan_service.preview(payload.to_profile())
        return {
            "ok": result.ok,
            "invalid_fields": list(result.invalid_fields),
            "plan": _plan_values(result.plan),
            "options": {
                "calorie_policy": state_container.plan_service.options.calorie_policy,
                "water_variant": state_container.plan_service.options.water_variant,
                "carb_mode": state_container.plan_service.options.carb_mode,
            },
        }

    return app


def _plan_values(plan: NutritionPlan) -> dict[str, object]:
    """Plan fields with non-finite values reported as null."""
    return {
        key: value if math.isfinite(value) else None
        for key, value in plan.to_dict().items()
    }


def _serialize_plan(record: PlanRecord) -> dict[str, object]:
    return {
        "id": str(record.id),
        "created_at": record.created_at.isoformat(),
        **_plan_values(record.plan),
    }


def _serialize_profile(record: ProfileRecord) -> dict[str, object]:
    return {
        **record.profile.to_dict(),
        "updated_at": record.updated_at.isoformat() if record.updated_at else None,
    }
