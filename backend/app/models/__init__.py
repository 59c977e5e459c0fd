from app.models.tenant import Tenant
from app.models.store import Store
from app.models.user import Role, User, UserStore
from app.models.invoice import Invoice

__all__ = [
    "Tenant",
    "Store",
    "Role", "User", "UserStore",
    "Invoice",
]
