import logging
from collections.abc import Callable
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import Forbidden, Unauthenticated
from app.core.security import decode_token
from app.db.session import get_session
from app.models.user import User
from app.services.scope import Principal

logger = logging.getLogger(__name__)

# Login lives in a separate service; the bearer header is optional because
# browsers send the session cookie instead.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


async def load_principal(db: AsyncSession, user_id: UUID) -> Principal | None:
    """Fetch the user and their explicit store assignments."""
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        return None
    return Principal(
        id=user.id,
        tenant_id=user.tenant_id,
        role=str(user.role),
        assigned_store_ids=tuple(user.assigned_store_ids),
        email=user.email,
        name=user.name,
        is_active=user.is_active is not False,
        must_change_password=bool(user.must_change_password),
    )


async def get_current_principal(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    db: Annotated[AsyncSession, Depends(get_session)],
) -> Principal:
    """Validate the session token (bearer header or cookie) and return the Principal."""
    raw = token or request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not raw:
        raise Unauthenticated()

    try:
        payload = decode_token(raw)
    except JWTError:
        raise Unauthenticated("Could not validate credentials")
    if payload.get("type") != "access" or not payload.get("sub"):
        raise Unauthenticated("Could not validate credentials")

    try:
        user_id = UUID(str(payload["sub"]))
    except ValueError:
        raise Unauthenticated("Could not validate credentials")

    principal = await load_principal(db, user_id)
    if principal is None:
        raise Unauthenticated("User not found")
    if not principal.is_active:
        raise Forbidden("Account disabled")
    return principal


def require_permission(allowed: Callable[[str], bool]):
    """Dependency factory: raises 403 unless ``allowed(principal.role)`` holds.

    ``allowed`` is one of the role predicates in ``app.models.user``.
    """
    async def check(principal: Annotated[Principal, Depends(get_current_principal)]):
        if not allowed(principal.role):
            raise Forbidden(f"Role '{principal.role}' is not permitted for this action.")
        return principal
    return check
