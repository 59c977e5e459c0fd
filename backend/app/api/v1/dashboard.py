"""Dashboard tiles: same-day metrics for one store."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import Clock, get_clock
from app.core.config import settings
from app.core.deps import get_current_principal
from app.core.limiter import limiter
from app.db.session import get_session
from app.schemas.dashboard import DashboardMetricsResponse
from app.services.insights import get_today_metrics
from app.services.scope import Principal

router = APIRouter()


@router.get("/metrics", response_model=DashboardMetricsResponse, summary="Today's invoice metrics")
@limiter.limit(settings.INSIGHTS_RATE_LIMIT)
async def get_dashboard_metrics(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    principal: Annotated[Principal, Depends(get_current_principal)],
    clock: Annotated[Clock, Depends(get_clock)],
    store_id: str | None = Query(default=None, alias="storeId"),
):
    return await get_today_metrics(db, principal, store_id, clock)
