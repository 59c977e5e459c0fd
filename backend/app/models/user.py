import enum
import uuid

from sqlalchemy import Boolean, ForeignKey, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.config import settings
from app.db.base import Base, TenantScopedMixin, TimestampMixin, UUIDMixin


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    DOCTOR = "DOCTOR"
    BILLING = "BILLING"
    SHOP_OWNER = "SHOP_OWNER"

    @classmethod
    def parse(cls, value) -> "Role | None":
        """Map a stored role string onto the enum; unknown roles yield None."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().upper())
        except ValueError:
            return None


def has_chain_wide_scope(role: Role | str | None) -> bool:
    """Chain owners see every store in their tenant, not just assigned ones."""
    return Role.parse(role) is Role.SHOP_OWNER


def can_view_insights(role: Role | str | None) -> bool:
    parsed = Role.parse(role)
    return parsed is not None and parsed.value in settings.insights_roles_list


def can_manage_stores(role: Role | str | None) -> bool:
    return Role.parse(role) in (Role.ADMIN, Role.SHOP_OWNER)


class User(Base, UUIDMixin, TimestampMixin, TenantScopedMixin):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(String(50), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    must_change_password: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    store_links: Mapped[list["UserStore"]] = relationship(
        "UserStore", back_populates="user", lazy="selectin"
    )

    @property
    def assigned_store_ids(self) -> list[uuid.UUID]:
        """Assigned stores inside the user's own tenant; stray cross-tenant links are ignored."""
        return [
            link.store_id for link in self.store_links
            if link.store is not None and link.store.tenant_id == self.tenant_id
        ]


class UserStore(Base):
    """Explicit user → store assignment. The unit of access for non-owner roles."""

    __tablename__ = "user_stores"
    __table_args__ = (UniqueConstraint("user_id", "store_id", name="uq_user_store"),)

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    store_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("stores.id", ondelete="CASCADE"), primary_key=True, index=True
    )

    user: Mapped["User"] = relationship("User", back_populates="store_links")
    store: Mapped["Store"] = relationship("Store", lazy="selectin")
