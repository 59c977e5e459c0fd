"""Tenant store listing (admins and shop owners)."""
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.deps import require_permission
from app.db.session import get_session
from app.models.user import can_manage_stores
from app.schemas.user import StoreListResponse, StoreSummary
from app.services.scope import Principal
from app.services.stores import list_stores

router = APIRouter()


@router.get("", response_model=StoreListResponse, summary="List stores in the caller's tenant")
async def get_stores(
    db: Annotated[AsyncSession, Depends(get_session)],
    principal: Annotated[Principal, Depends(require_permission(can_manage_stores))],
):
    stores = await list_stores(db, principal.tenant_id)
    return StoreListResponse(stores=[
        StoreSummary(id=str(s.id), name=s.name, city=s.city, is_active=s.is_active)
        for s in stores
    ])
