"""Insights overview endpoint."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import Clock, get_clock
from app.core.config import settings
from app.core.deps import get_current_principal
from app.core.limiter import limiter
from app.db.session import get_session
from app.schemas.insights import InsightsOverview
from app.services.insights import get_overview
from app.services.scope import Principal

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get(
    "/overview",
    response_model=InsightsOverview,
    summary="Today vs yesterday and month vs last month, per scope and per store",
)
@limiter.limit(settings.INSIGHTS_RATE_LIMIT)
async def get_insights_overview(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
    principal: Annotated[Principal, Depends(get_current_principal)],
    clock: Annotated[Clock, Depends(get_clock)],
    store_id: str | None = Query(default=None, alias="storeId", description='Store id or "all"'),
):
    """Decorated aggregates for the resolved scope, plus a per-store breakdown
    ranked by month-to-date gross revenue.

    ``storeId=all`` is honoured for shop owners only; other roles fall back to
    their first assigned store.
    """
    return await get_overview(db, principal, store_id, clock)
