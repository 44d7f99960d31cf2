"""Tenant-defined custom role model."""

from sqlalchemy import String, Integer, Text, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from fleet_rbac.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from fleet_rbac.models.tenant import Tenant


class CustomRole(Base, TimestampMixin):
    """
    Role created by a tenant with an independently editable permission set.

    Permissions are stored as a JSON array of catalog identifiers. The
    array is always replaced wholesale, never mutated in place.

    Constraints:
    - Unique(name, tenant_id) - the authoritative guard against two
      concurrent creators picking the same name
    """

    __tablename__ = "custom_roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    permissions: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    tenant_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Relationships
    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="custom_roles")

    # Constraints
    __table_args__ = (
        UniqueConstraint("name", "tenant_id", name="uq_custom_role_name_tenant"),
    )

    def __repr__(self) -> str:
        return f"<CustomRole(name='{self.name}', tenant_id='{self.tenant_id}')>"
