"""Insights overview Pydantic schemas. Serialized with camelCase keys."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TimeRangeOut(CamelModel):
    start_utc: datetime
    end_utc: datetime


class InsightsRanges(CamelModel):
    today: TimeRangeOut
    yesterday: TimeRangeOut
    this_month: TimeRangeOut
    last_month: TimeRangeOut


class ScopeLabel(CamelModel):
    id: str       # store id or "all"
    name: str


class DecoratedMetric(CamelModel):
    value: int | float
    delta: int | float
    delta_pct: float


class DecoratedAggregate(CamelModel):
    invoice_count: DecoratedMetric
    unpaid_count: DecoratedMetric
    gross_revenue: DecoratedMetric
    paid_revenue: DecoratedMetric
    avg_invoice_value: DecoratedMetric


class PeriodComparison(CamelModel):
    today: DecoratedAggregate   # vs yesterday
    month: DecoratedAggregate   # vs last month


class StoreInsights(PeriodComparison):
    id: str
    name: str
    city: str | None = None


class InsightsOverview(CamelModel):
    scope: ScopeLabel
    ranges: InsightsRanges
    tenant: PeriodComparison
    stores: list[StoreInsights]
