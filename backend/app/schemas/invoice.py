"""Invoice payload schemas.

``totals_json`` is an untyped bag written by the billing screens. It is parsed
into ``InvoiceTotals`` here so aggregation code never sees raw JSON.
"""
import json
import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def safe_number(value: Any) -> float:
    """Coerce to a finite float; anything else (None, "", "abc", NaN) becomes 0."""
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


class InvoiceTotals(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    total: float = 0.0
    sub_total: float = Field(default=0.0, alias="subTotal")
    discount: float = 0.0
    payment_mode: str | None = Field(default=None, alias="paymentMode")
    paid: bool | None = None

    @field_validator("total", mode="before")
    @classmethod
    def _coerce_total(cls, v: Any) -> float:
        # A negative total is bad data; paid revenue must never exceed gross.
        return max(safe_number(v), 0.0)

    @field_validator("sub_total", "discount", mode="before")
    @classmethod
    def _coerce_numeric(cls, v: Any) -> float:
        return safe_number(v)

    @field_validator("payment_mode", mode="before")
    @classmethod
    def _coerce_mode(cls, v: Any) -> str | None:
        if v is None:
            return None
        return str(v).strip() or None

    @field_validator("paid", mode="before")
    @classmethod
    def _coerce_paid(cls, v: Any) -> bool | None:
        return v if isinstance(v, bool) else None

    @classmethod
    def from_json(cls, raw: Any) -> "InvoiceTotals":
        """Parse a totals_json column value; tolerates strings, None and junk."""
        if isinstance(raw, (str, bytes)):
            try:
                raw = json.loads(raw)
            except ValueError:
                raw = None
        if not isinstance(raw, dict):
            raw = {}
        return cls.model_validate(raw)
