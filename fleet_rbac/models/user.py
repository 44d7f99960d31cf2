from sqlalchemy import String, Integer, Boolean, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from fleet_rbac.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from fleet_rbac.models.tenant import Tenant


class User(Base, TimestampMixin):
    """
    Users of a tenant and the role they hold there.

    Only stores auth_user_id (sub from JWT) - no auth credentials.
    organization_role is a role name, resolved against the system role
    templates first and the tenant's custom roles second. A user with
    custom_permissions gets those instead of the role's permissions.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    auth_user_id: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    # auth_user_id is the 'sub' claim from JWT
    tenant_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,  # Critical for multi-tenant queries
    )
    organization_role: Mapped[str] = mapped_column(String(100), nullable=False, default="user")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # {"block_permissions": [...], "granular_permissions": [...]}; replaces the role's set when present
    custom_permissions: Mapped[dict | None] = mapped_column(
        JSON(none_as_null=True), nullable=True, default=None
    )

    # Relationships
    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="users")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, tenant_id='{self.tenant_id}', role='{self.organization_role}')>"
