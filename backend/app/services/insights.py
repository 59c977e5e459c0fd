"""Insights overview and same-day dashboard metrics.

One overview request loads a single invoice snapshot covering last month
through today for the scoped stores, then folds it per window and per store.
Every number in the response therefore comes from the same read.
"""
import logging
import uuid
from collections.abc import Collection
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import Clock
from app.core.errors import Forbidden
from app.models.user import can_view_insights
from app.schemas.dashboard import DashboardMetrics, DashboardMetricsResponse
from app.schemas.insights import (
    InsightsOverview,
    InsightsRanges,
    PeriodComparison,
    ScopeLabel,
    StoreInsights,
    TimeRangeOut,
)
from app.services.aggregator import InvoiceRow, aggregate, compute_aggregate, find_invoices
from app.services.deltas import decorate
from app.services.scope import ALL_STORES, Principal, Scope, resolve_request_scope
from app.services.stores import StoreRef, list_stores
from app.services.time_ranges import (
    TimeRange,
    covering_range,
    current_month_range,
    day_range,
    last_month_range,
)

logger = logging.getLogger(__name__)

ALL_STORES_LABEL = "All Stores"
UNKNOWN_STORE_LABEL = "Store"


@dataclass(frozen=True)
class InsightWindows:
    today: TimeRange
    yesterday: TimeRange
    this_month: TimeRange
    last_month: TimeRange

    def covering(self) -> TimeRange:
        return covering_range(self.today, self.yesterday, self.this_month, self.last_month)

    def to_schema(self) -> InsightsRanges:
        return InsightsRanges(**{
            name: _range_out(getattr(self, name))
            for name in ("today", "yesterday", "this_month", "last_month")
        })


def _range_out(r: TimeRange) -> TimeRangeOut:
    return TimeRangeOut(start_utc=r.start_utc, end_utc=r.end_utc)


def resolve_windows(clock: Clock) -> InsightWindows:
    return InsightWindows(
        today=day_range(clock, 0),
        yesterday=day_range(clock, -1),
        this_month=current_month_range(clock),
        last_month=last_month_range(clock),
    )


# ─── Pure assembly ───

def compare_periods(
    rows: list[InvoiceRow],
    store_ids: Collection[uuid.UUID],
    windows: InsightWindows,
) -> PeriodComparison:
    """Today vs yesterday and this month vs last month for one store set."""
    return PeriodComparison(
        today=decorate(
            aggregate(rows, store_ids, windows.today),
            aggregate(rows, store_ids, windows.yesterday),
        ),
        month=decorate(
            aggregate(rows, store_ids, windows.this_month),
            aggregate(rows, store_ids, windows.last_month),
        ),
    )


def rank_stores(entries: list[StoreInsights]) -> list[StoreInsights]:
    """Month-to-date gross revenue, highest first. Ties keep input order."""
    return sorted(entries, key=lambda s: s.month.gross_revenue.value, reverse=True)


def build_store_breakdown(
    rows: list[InvoiceRow],
    stores: list[StoreRef],
    windows: InsightWindows,
) -> list[StoreInsights]:
    # Each store is compared against its own prior period.
    entries = []
    for store in stores:
        comparison = compare_periods(rows, [store.id], windows)
        entries.append(StoreInsights(
            id=str(store.id),
            name=store.name,
            city=store.city,
            today=comparison.today,
            month=comparison.month,
        ))
    return rank_stores(entries)


def scope_label(scope: Scope, stores: list[StoreRef]) -> ScopeLabel:
    if scope.all_stores:
        return ScopeLabel(id=ALL_STORES, name=ALL_STORES_LABEL)
    store_id = scope.store_ids[0]
    match = next((s for s in stores if s.id == store_id), None)
    if match is None:
        return ScopeLabel(id=str(store_id), name=UNKNOWN_STORE_LABEL)
    return ScopeLabel(id=str(match.id), name=match.name)


def build_overview(
    rows: list[InvoiceRow],
    scope: Scope,
    stores: list[StoreRef],
    windows: InsightWindows,
) -> InsightsOverview:
    return InsightsOverview(
        scope=scope_label(scope, stores),
        ranges=windows.to_schema(),
        tenant=compare_periods(rows, scope.store_ids, windows),
        stores=build_store_breakdown(rows, stores, windows),
    )


# ─── Request entry points ───

async def _scope_stores(db: AsyncSession, scope: Scope) -> list[StoreRef]:
    if scope.stores:
        return list(scope.stores)
    return await list_stores(db, scope.tenant_id, scope.store_ids)


async def get_overview(
    db: AsyncSession,
    principal: Principal,
    requested_store_id: str | None,
    clock: Clock,
) -> InsightsOverview:
    if not can_view_insights(principal.role):
        raise Forbidden("Not allowed")

    scope = await resolve_request_scope(db, principal, requested_store_id)
    windows = resolve_windows(clock)

    stores = await _scope_stores(db, scope)
    rows = await find_invoices(db, scope.tenant_id, scope.store_ids, windows.covering())

    logger.info(
        "Insights overview: user=%s stores=%d all=%s rows=%d",
        principal.id, len(scope.store_ids), scope.all_stores, len(rows),
    )
    return build_overview(rows, scope, stores, windows)


async def get_today_metrics(
    db: AsyncSession,
    principal: Principal,
    requested_store_id: str | None,
    clock: Clock,
) -> DashboardMetricsResponse:
    scope = await resolve_request_scope(db, principal, requested_store_id)
    today = day_range(clock, 0)

    stores = await _scope_stores(db, scope)
    agg = await compute_aggregate(db, scope.tenant_id, scope.store_ids, today)

    return DashboardMetricsResponse(
        store=scope_label(scope, stores),
        range=_range_out(today),
        metrics=DashboardMetrics(
            invoices_today=agg.invoice_count,
            today_sales_gross=agg.gross_revenue,
            today_sales_paid=agg.paid_revenue,
            unpaid_invoices_today=agg.unpaid_count,
        ),
    )
