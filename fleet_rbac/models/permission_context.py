"""Permission context for request authorization."""

from dataclasses import dataclass, field
from fleet_rbac.core import authorization
from fleet_rbac.core.role_hierarchy import assignable_roles, can_assign_role
from fleet_rbac.models.user import User


@dataclass
class PermissionContext:
    """
    Resolved authorization state of the acting user.

    Built once per request from the JWT user and their role, and passed to
    services instead of re-reading permissions from storage.

    Attributes:
        user: The authenticated User object
        role_name: Name of the user's role (system or custom)
        permissions: Effective permission identifiers of that role
    """

    user: User
    role_name: str
    permissions: frozenset[str] = field(default_factory=frozenset)

    @property
    def tenant_id(self) -> str:
        return self.user.tenant_id

    def has_permission(self, permission: str) -> bool:
        return authorization.has_permission(self.permissions, permission)

    def has_any_permission(self, *permissions: str) -> bool:
        return authorization.has_any_permission(self.permissions, *permissions)

    def has_all_permissions(self, *permissions: str) -> bool:
        return authorization.has_all_permissions(self.permissions, *permissions)

    def can_create_roles(self) -> bool:
        return authorization.can_create_roles(self.permissions)

    def can_edit_roles(self) -> bool:
        return authorization.can_edit_roles(self.permissions)

    def can_delete_roles(self) -> bool:
        return authorization.can_delete_roles(self.permissions)

    def can_manage_roles(self) -> bool:
        return authorization.can_manage_roles(self.permissions)

    def assignable_roles(self) -> list[str]:
        return assignable_roles(self.role_name)

    def can_assign_role(self, target_role: str) -> bool:
        return can_assign_role(self.role_name, target_role)

    def __repr__(self) -> str:
        return f"<PermissionContext(user_id={self.user.id}, tenant_id='{self.tenant_id}', role='{self.role_name}')>"
