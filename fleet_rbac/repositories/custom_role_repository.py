"""Repository for CustomRole model operations."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from fleet_rbac.core.exceptions import ConflictException
from fleet_rbac.models.custom_role import CustomRole


class CustomRoleRepository:
    """Repository for CustomRole model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_name(self, name: str, tenant_id: str) -> CustomRole | None:
        """
        Get a tenant's custom role by name.

        Args:
            name: Role name
            tenant_id: Tenant key

        Returns:
            CustomRole object or None if not found
        """
        return (
            self.db.query(CustomRole)
            .filter(CustomRole.name == name, CustomRole.tenant_id == tenant_id)
            .first()
        )

    def get_tenant_roles(self, tenant_id: str) -> list[CustomRole]:
        """
        Get all custom roles of a tenant, newest first.

        Args:
            tenant_id: Tenant key

        Returns:
            List of CustomRole objects
        """
        return (
            self.db.query(CustomRole)
            .filter(CustomRole.tenant_id == tenant_id)
            .order_by(CustomRole.created_at.desc(), CustomRole.id.desc())
            .all()
        )

    def create(self, role: CustomRole) -> CustomRole:
        """
        Create a new custom role.

        The (name, tenant_id) unique constraint decides races between
        concurrent creators; the loser gets a ConflictException.

        Args:
            role: CustomRole object to create

        Returns:
            Created CustomRole object with ID populated

        Raises:
            ConflictException: If (name, tenant_id) already exists
        """
        self.db.add(role)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictException(f"Role '{role.name}' already exists")
        self.db.refresh(role)
        return role

    def update_permissions(self, role: CustomRole, permissions: list[str]) -> CustomRole:
        """
        Replace a custom role's permission set.

        Args:
            role: CustomRole object to update
            permissions: New permission identifiers

        Returns:
            Updated CustomRole object
        """
        role.permissions = list(permissions)
        self.db.commit()
        self.db.refresh(role)
        return role

    def delete(self, role: CustomRole) -> None:
        """
        Delete a custom role.

        Args:
            role: CustomRole object to delete
        """
        self.db.delete(role)
        self.db.commit()
