"""Store lookups scoped to a tenant."""
import logging
import uuid
from collections.abc import Collection
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ComputationError
from app.models.store import Store

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreRef:
    id: uuid.UUID
    name: str
    city: str | None = None
    is_active: bool = True


async def list_stores(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    store_ids: Collection[uuid.UUID] | None = None,
) -> list[StoreRef]:
    """Stores of ``tenant_id`` ordered by name, optionally restricted to ``store_ids``."""
    stmt = select(Store.id, Store.name, Store.city, Store.is_active).where(Store.tenant_id == tenant_id)
    if store_ids is not None:
        if not store_ids:
            return []
        stmt = stmt.where(Store.id.in_(list(store_ids)))
    stmt = stmt.order_by(Store.name.asc())

    try:
        records = (await db.execute(stmt)).all()
    except SQLAlchemyError as exc:
        logger.error("list_stores failed for tenant %s", tenant_id, exc_info=True)
        raise ComputationError("Failed to load stores") from exc

    return [
        StoreRef(id=r.id, name=r.name, city=r.city, is_active=r.is_active is not False)
        for r in records
    ]
