"""Invoice aggregation over a store set and a time range.

``aggregate`` is pure: it folds already-loaded ``InvoiceRow``s into an
``Aggregate``. ``find_invoices`` / ``compute_aggregate`` are the thin async
layer over the database.
"""
import logging
import uuid
from collections.abc import Collection, Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ComputationError
from app.models.invoice import Invoice
from app.schemas.invoice import InvoiceTotals
from app.services.time_ranges import TimeRange

logger = logging.getLogger(__name__)

PAID = "paid"
UNPAID = "unpaid"


# ─── Value objects ───

@dataclass(frozen=True)
class InvoiceRow:
    store_id: uuid.UUID
    payment_status: str | None
    created_at: datetime
    totals: InvoiceTotals

    @classmethod
    def from_record(cls, record: Any) -> "InvoiceRow":
        created_at = record.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return cls(
            store_id=record.store_id,
            payment_status=record.payment_status,
            created_at=created_at,
            totals=InvoiceTotals.from_json(record.totals_json),
        )


@dataclass(frozen=True)
class Aggregate:
    invoice_count: int = 0
    unpaid_count: int = 0
    gross_revenue: float = 0.0
    paid_revenue: float = 0.0
    avg_invoice_value: float = 0.0


ZERO_AGGREGATE = Aggregate()


def normalize_payment_status(value: Any) -> str:
    """'  Paid ' -> 'paid'. None -> ''."""
    if value is None:
        return ""
    return str(value).strip().lower()


# ─── Pure fold ───

def aggregate(
    rows: Iterable[InvoiceRow],
    store_ids: Collection[uuid.UUID],
    time_range: TimeRange | None = None,
) -> Aggregate:
    """Fold rows belonging to ``store_ids`` (and inside ``time_range``, if given).

    Partial (or any other) status counts toward invoice_count/gross_revenue only.
    """
    wanted = set(store_ids)
    if not wanted:
        return ZERO_AGGREGATE

    invoice_count = 0
    unpaid_count = 0
    gross_revenue = 0.0
    paid_revenue = 0.0

    for row in rows:
        if row.store_id not in wanted:
            continue
        if time_range is not None and not time_range.contains(row.created_at):
            continue

        invoice_count += 1
        total = row.totals.total
        gross_revenue += total

        status = normalize_payment_status(row.payment_status)
        if status == PAID:
            paid_revenue += total
        elif status == UNPAID:
            unpaid_count += 1

    avg_invoice_value = gross_revenue / invoice_count if invoice_count > 0 else 0.0

    return Aggregate(
        invoice_count=invoice_count,
        unpaid_count=unpaid_count,
        gross_revenue=gross_revenue,
        paid_revenue=paid_revenue,
        avg_invoice_value=avg_invoice_value,
    )


# ─── Storage ───

async def find_invoices(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    store_ids: Collection[uuid.UUID],
    time_range: TimeRange,
) -> list[InvoiceRow]:
    """Invoices with tenant = tenant_id, store in store_ids, start <= created_at < end."""
    if not store_ids:
        return []

    stmt = select(
        Invoice.store_id,
        Invoice.payment_status,
        Invoice.created_at,
        Invoice.totals_json,
    ).where(
        Invoice.tenant_id == tenant_id,
        Invoice.store_id.in_(list(store_ids)),
        Invoice.created_at >= time_range.start_utc,
        Invoice.created_at < time_range.end_utc,
    )
    try:
        records = (await db.execute(stmt)).all()
    except SQLAlchemyError as exc:
        logger.error(
            "find_invoices failed: tenant=%s stores=%d range=%s..%s",
            tenant_id, len(store_ids), time_range.start_utc, time_range.end_utc,
            exc_info=True,
        )
        raise ComputationError() from exc

    return [InvoiceRow.from_record(r) for r in records]


async def compute_aggregate(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    store_ids: Collection[uuid.UUID],
    time_range: TimeRange,
) -> Aggregate:
    """Query one window and fold it. Empty store_ids never touches the database."""
    if not store_ids:
        return ZERO_AGGREGATE
    rows = await find_invoices(db, tenant_id, store_ids, time_range)
    return aggregate(rows, store_ids, time_range)
