"""Dashboard API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.api.dependencies import get_request_id, unwrap
from catalog_api.api.schemas import DashboardStatsResponse
from catalog_api.application.dashboard_service import DashboardService, get_dashboard_service
from catalog_api.infrastructure.database import get_session

router = APIRouter(prefix="/admin/dashboard", tags=["Dashboard"])


def get_service(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DashboardService:
    """Get dashboard service with request ID."""
    return get_dashboard_service(session, request_id=get_request_id(request))


@router.get(
    "/stats",
    response_model=DashboardStatsResponse,
    summary="Dashboard statistics",
)
async def dashboard_stats(
    service: Annotated[DashboardService, Depends(get_service)],
) -> DashboardStatsResponse:
    """Overview counters, top products by stock and taxonomy breakdowns."""
    return DashboardStatsResponse.model_validate(unwrap(await service.get_dashboard_stats()))
