"""
Health check endpoints.

Liveness, readiness (database connectivity), and background refresh status.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from pokeprice.api.dependencies import get_data_service
from pokeprice.db.database import get_session
from pokeprice.services.data_service import DataService

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str | None = None


class RefreshStatusResponse(BaseModel):
    """Background set-list refresh counters."""

    attempts: int
    successes: int
    failures: int
    last_success: str | None = None
    last_failure: str | None = None
    last_error: str | None = None
    current_set_codes: list[str]


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness check. Does not check dependencies."""
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> HealthResponse:
    """
    Readiness check.

    Checks database connectivity. Returns 503 if the cache database is
    unavailable.
    """
    try:
        await session.execute(text("SELECT 1"))
        return HealthResponse(status="ready", database="connected")
    except Exception:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", database="disconnected")


@router.get("/status/refresh", response_model=RefreshStatusResponse)
async def refresh_status(
    service: Annotated[DataService, Depends(get_data_service)],
) -> RefreshStatusResponse:
    """
    Background refresh counters.

    Failed stale-while-revalidate refreshes never reach the caller that
    triggered them; this endpoint is where they become visible.
    """
    data: dict[str, Any] = service.refresh_status.to_dict()
    return RefreshStatusResponse(
        **data,
        current_set_codes=sorted(service.current_sets.current_set_codes),
    )
