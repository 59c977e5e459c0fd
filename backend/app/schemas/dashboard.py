"""Same-day dashboard metrics schemas."""
from app.schemas.insights import CamelModel, ScopeLabel, TimeRangeOut


class DashboardMetrics(CamelModel):
    invoices_today: int
    today_sales_gross: float
    today_sales_paid: float
    unpaid_invoices_today: int


class DashboardMetricsResponse(CamelModel):
    store: ScopeLabel
    range: TimeRangeOut
    metrics: DashboardMetrics
