"""User API endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import get_current_principal
from app.db.session import get_session
from app.models.tenant import Tenant
from app.models.user import has_chain_wide_scope
from app.schemas.user import CurrentUserResponse, StoreSummary, TenantSummary
from app.services.scope import Principal
from app.services.stores import list_stores

router = APIRouter()


@router.get(
    "/me",
    response_model=CurrentUserResponse,
    summary="Get current authenticated user info",
)
async def get_current_user_info(
    db: Annotated[AsyncSession, Depends(get_session)],
    principal: Annotated[Principal, Depends(get_current_principal)],
):
    """Return the caller's profile and the stores they can switch between.

    Shop owners see every store in the tenant; other roles see their assignments.
    """
    if has_chain_wide_scope(principal.role):
        stores = await list_stores(db, principal.tenant_id)
    else:
        stores = await list_stores(db, principal.tenant_id, principal.assigned_store_ids)

    tenant_name = (
        await db.execute(select(Tenant.name).where(Tenant.id == principal.tenant_id))
    ).scalar_one_or_none()

    return CurrentUserResponse(
        id=str(principal.id),
        email=principal.email,
        name=principal.name,
        role=principal.role,
        must_change_password=principal.must_change_password,
        is_active=principal.is_active,
        tenant=TenantSummary(name=tenant_name) if tenant_name is not None else None,
        stores=[
            StoreSummary(id=str(s.id), name=s.name, city=s.city, is_active=s.is_active)
            for s in stores
        ],
    )
