"""Principal profile and store listing schemas."""
from app.schemas.insights import CamelModel


class StoreSummary(CamelModel):
    id: str
    name: str
    city: str | None = None
    is_active: bool = True


class TenantSummary(CamelModel):
    name: str | None = None


class CurrentUserResponse(CamelModel):
    id: str
    email: str | None = None
    name: str | None = None
    role: str
    must_change_password: bool = False
    is_active: bool = True
    tenant: TenantSummary | None = None
    stores: list[StoreSummary]


class StoreListResponse(CamelModel):
    stores: list[StoreSummary]
