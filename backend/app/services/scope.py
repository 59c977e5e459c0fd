"""Store scope resolution.

Decides which stores a principal may aggregate over for a request:

* chain-wide roles (shop owners) may ask for ``"all"`` or any tenant store;
* everyone else is limited to explicitly assigned stores, and ``"all"``
  quietly falls back to their default store.

All authorization errors are raised here, before any aggregation runs.
"""
import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import Forbidden, NotFound, Unauthenticated
from app.models.user import has_chain_wide_scope
from app.services.stores import StoreRef, list_stores

logger = logging.getLogger(__name__)

ALL_STORES = "all"


@dataclass(frozen=True)
class Principal:
    id: uuid.UUID
    tenant_id: uuid.UUID
    role: str
    assigned_store_ids: tuple[uuid.UUID, ...] = field(default_factory=tuple)
    email: str | None = None
    name: str | None = None
    is_active: bool = True
    must_change_password: bool = False


@dataclass(frozen=True)
class Scope:
    tenant_id: uuid.UUID
    store_ids: tuple[uuid.UUID, ...]
    all_stores: bool = False
    # Loaded store rows in scope, when the resolver already had to read them.
    stores: tuple[StoreRef, ...] = ()


def _parse_store_id(raw: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(str(raw).strip())
    except ValueError:
        return None


def resolve_scope(
    principal: Principal | None,
    requested_store_id: str | None,
    tenant_store_ids: Sequence[uuid.UUID] = (),
) -> Scope:
    """Resolve the store set for one request.

    Args:
        principal: Authenticated caller, or None.
        requested_store_id: Store UUID string, ``"all"``, or None for the default store.
        tenant_store_ids: Every store id of the tenant, ordered by name. Only
            consulted for chain-wide roles.

    Raises:
        Unauthenticated: no principal.
        Forbidden: principal has no store access, or asked for a store
            outside their assignment.
        NotFound: chain-wide principal asked for a store outside the tenant.
    """
    if principal is None:
        raise Unauthenticated()

    requested = (requested_store_id or "").strip() or None

    if has_chain_wide_scope(principal.role):
        allowed = list(tenant_store_ids)
        if not allowed:
            raise Forbidden()

        if requested == ALL_STORES:
            return Scope(principal.tenant_id, tuple(allowed), all_stores=True)

        if requested is not None:
            store_id = _parse_store_id(requested)
            if store_id is None or store_id not in allowed:
                raise NotFound()
            return Scope(principal.tenant_id, (store_id,))

        default = next((s for s in principal.assigned_store_ids if s in allowed), allowed[0])
        return Scope(principal.tenant_id, (default,))

    allowed = list(principal.assigned_store_ids)
    if not allowed:
        raise Forbidden()

    if requested is not None and requested != ALL_STORES:
        store_id = _parse_store_id(requested)
        if store_id is None or store_id not in allowed:
            logger.info("Store %s outside scope of user %s", requested, principal.id)
            raise Forbidden()
        return Scope(principal.tenant_id, (store_id,))

    return Scope(principal.tenant_id, (allowed[0],))


async def resolve_request_scope(
    db: AsyncSession,
    principal: Principal | None,
    requested_store_id: str | None,
) -> Scope:
    """``resolve_scope`` with the tenant's stores loaded for chain-wide roles.

    For those roles the returned scope carries the loaded ``StoreRef``s so
    callers need not read them again.
    """
    if principal is None:
        raise Unauthenticated()

    if not has_chain_wide_scope(principal.role):
        return resolve_scope(principal, requested_store_id)

    tenant_stores = await list_stores(db, principal.tenant_id)
    scope = resolve_scope(principal, requested_store_id, [s.id for s in tenant_stores])
    return replace(scope, stores=tuple(s for s in tenant_stores if s.id in scope.store_ids))
