"""Tenant model for multi-tenant isolation."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from fleet_rbac.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from fleet_rbac.models.user import User
    from fleet_rbac.models.custom_role import CustomRole


class Tenant(Base, TimestampMixin):
    """
    Multi-tenant isolation boundary.

    A tenant is one carrier organization, identified by a string key
    such as its DOT number ("DOT123456"). Users, custom roles and
    system role overrides all belong to exactly one tenant.
    """

    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relationships
    users: Mapped[list["User"]] = relationship(
        "User",
        back_populates="tenant",
        cascade="all, delete-orphan",
    )
    custom_roles: Mapped[list["CustomRole"]] = relationship(
        "CustomRole",
        back_populates="tenant",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Tenant(id='{self.id}', name='{self.name}')>"
