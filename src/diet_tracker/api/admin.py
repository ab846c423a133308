"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from diet_tracker.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str | None:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str | None = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not admin_token or not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/errors", dependencies=[Depends(require_admin)])
async def list_provider_errors(request: Request) -> dict[str, object]:
    """Return recent provider failures, newest first."""
    container: AppContainer = request.app.state.container
    entries = container.error_log.entries()
    return {"errors": list(reversed(entries))}


@router.get("/quota", dependencies=[Depends(require_admin)])
async def quota_state(request: Request) -> dict[str, object]:
    """Return today's raw quota usage."""
    container: AppContainer = request.app.state.container
    state = container.quota_tracker.check_and_maybe_reset()
    return {
        "date": state.date.isoformat(),
        "used": state.used_count,
        "daily_limit": container.quota_tracker.daily_limit,
    }
