"""Repository for RolePermissionOverride model operations."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from fleet_rbac.models.role_permission_override import RolePermissionOverride


class RoleOverrideRepository:
    """Repository for RolePermissionOverride model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, role_name: str, tenant_id: str) -> RolePermissionOverride | None:
        """Get a tenant's override for a system role"""
        return (
            self.db.query(RolePermissionOverride)
            .filter(
                RolePermissionOverride.role_name == role_name,
                RolePermissionOverride.tenant_id == tenant_id,
            )
            .first()
        )

    def get_tenant_overrides(self, tenant_id: str) -> dict[str, RolePermissionOverride]:
        """All overrides of a tenant keyed by role name"""
        overrides = (
            self.db.query(RolePermissionOverride)
            .filter(RolePermissionOverride.tenant_id == tenant_id)
            .all()
        )
        return {override.role_name: override for override in overrides}

    def upsert(self, role_name: str, tenant_id: str, permissions: list[str]) -> RolePermissionOverride:
        """
        Create or replace a tenant's override for a system role.

        Args:
            role_name: System role name
            tenant_id: Tenant key
            permissions: Replacement permission identifiers

        Two first-time writers race on the (role_name, tenant_id) unique
        constraint; the loser rolls back and overwrites the winner's row,
        so the last write wins.

        Returns:
            Stored RolePermissionOverride object
        """
        override = self.get(role_name, tenant_id)
        if override is None:
            override = RolePermissionOverride(
                role_name=role_name, tenant_id=tenant_id, permissions=list(permissions)
            )
            self.db.add(override)
            try:
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                override = self.get(role_name, tenant_id)
                override.permissions = list(permissions)
                self.db.commit()
        else:
            override.permissions = list(permissions)
            self.db.commit()
        self.db.refresh(override)
        return override
