"""Shared FastAPI dependencies."""

from fastapi import Depends, Header, HTTPException, Request, status

from nutrition_coach.containers import AppContainer
from nutrition_coach.domain.models import UserRecord


def get_container(request: Request) -> AppContainer:
    """Return the dependency container attached to the app."""
    return request.app.state.container


async def current_user(
    x_user_id: str | None = Header(default=None),
    container: AppContainer = Depends(get_container),
) -> UserRecord:
    """Resolve the authenticated user passed by the auth gateway."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return container.user_service.ensure_user(x_user_id.strip())
