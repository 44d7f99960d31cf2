"""Per-tenant replacement permission sets for system roles."""

from sqlalchemy import String, Integer, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from fleet_rbac.models.base import Base, TimestampMixin


class RolePermissionOverride(Base, TimestampMixin):
    """
    A tenant's edited permission set for a built-in role.

    The role templates themselves never change; when a tenant edits
    "manager", the new set is stored here and used for that tenant only.
    The owner role can never have an override.
    """

    __tablename__ = "role_permission_overrides"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    role_name: Mapped[str] = mapped_column(String(100), nullable=False)
    tenant_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    permissions: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    __table_args__ = (
        UniqueConstraint("role_name", "tenant_id", name="uq_role_override_tenant"),
    )

    def __repr__(self) -> str:
        return f"<RolePermissionOverride(role_name='{self.role_name}', tenant_id='{self.tenant_id}')>"
