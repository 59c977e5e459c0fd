import uuid

from sqlalchemy import ForeignKey, Index, JSON, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TenantScopedMixin, TimestampMixin, UUIDMixin

PAYMENT_STATUSES = ("Paid", "Unpaid", "Partial")


class Invoice(Base, UUIDMixin, TimestampMixin, TenantScopedMixin):
    __tablename__ = "invoices"
    __table_args__ = (
        Index("ix_invoices_tenant_store_created_at", "tenant_id", "store_id", "created_at"),
    )

    store_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("stores.id"), nullable=False, index=True
    )
    patient_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True, index=True)
    order_id: Mapped[uuid.UUID | None] = mapped_column(UUID(as_uuid=True), nullable=True)
    invoice_no: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    # {items, subTotal, discount, total, paid, paymentMode}; untyped, see schemas.invoice.InvoiceTotals
    totals_json: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    payment_status: Mapped[str] = mapped_column(String(20), nullable=False, default="Unpaid")  # free text

    store: Mapped["Store"] = relationship("Store")
