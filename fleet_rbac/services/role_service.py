import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session
from fleet_rbac.core.permission_catalog import DEFAULT_CATALOG, PermissionCatalog
from fleet_rbac.core.protection import (
    assert_creatable,
    assert_deletable,
    assert_modifiable,
    is_protected_role,
)
from fleet_rbac.core.role_templates import (
    DEFAULT_TEMPLATE_STORE,
    RoleTemplate,
    RoleTemplateStore,
)
from fleet_rbac.models.custom_role import CustomRole
from fleet_rbac.models.permission_context import PermissionContext
from fleet_rbac.models.role_permission_override import RolePermissionOverride
from fleet_rbac.repositories.custom_role_repository import CustomRoleRepository
from fleet_rbac.repositories.role_override_repository import RoleOverrideRepository
from fleet_rbac.repositories.tenant_repository import TenantRepository
from fleet_rbac.repositories.user_repository import UserRepository
from fleet_rbac.schemas.role_schemas import RoleCreate
from fleet_rbac.core.exceptions import (
    ConflictException,
    ForbiddenException,
    InvalidPermissionException,
    NotFoundException,
    PermissionDeniedException,
)

logger = logging.getLogger(__name__)


class RoleService:
    """Service layer for system and custom role management"""

    def __init__(
        self,
        db: Session,
        catalog: PermissionCatalog = DEFAULT_CATALOG,
        templates: RoleTemplateStore = DEFAULT_TEMPLATE_STORE,
    ):
        self.db = db
        self.catalog = catalog
        self.templates = templates
        self.custom_role_repo = CustomRoleRepository(db)
        self.override_repo = RoleOverrideRepository(db)
        self.tenant_repo = TenantRepository(db)
        self.user_repo = UserRepository(db)

    def validate_permissions(self, permissions: Iterable[str]) -> list[str]:
        """
        Reject identifiers the catalog does not know.

        Returns:
            Sorted, de-duplicated permission identifiers

        Raises:
            InvalidPermissionException: If any identifier is unknown
        """
        permissions = list(permissions)
        unknown = sorted({p for p in permissions if not self.catalog.is_known(p)})
        if unknown:
            raise InvalidPermissionException(unknown)
        return sorted(set(permissions))

    def _system_role(
        self, template: RoleTemplate, override: RolePermissionOverride | None = None
    ) -> dict:
        if override is not None and not is_protected_role(template.name):
            permissions = override.permissions
        else:
            permissions = self.templates.permissions_for(template.name)
        return {
            "name": template.name,
            "display_name": template.display_name,
            "description": template.description,
            "is_custom": False,
            "permissions": sorted(permissions),
            "created_at": None,
            "updated_at": override.updated_at if override is not None else None,
        }

    @staticmethod
    def _custom_role(role: CustomRole) -> dict:
        return {
            "name": role.name,
            "display_name": role.display_name,
            "description": role.description,
            "is_custom": True,
            "permissions": sorted(role.permissions or []),
            "created_at": role.created_at,
            "updated_at": role.updated_at,
        }

    def resolve_permissions(self, role_name: str, tenant_id: str) -> frozenset[str]:
        """
        Effective permissions of a role name within a tenant.

        System roles win over custom roles; a tenant override replaces a
        system role's template set (never for owner). Unknown roles grant
        nothing.

        Args:
            role_name: Role name stored on the user
            tenant_id: Tenant key

        Returns:
            Permission identifiers granted by the role
        """
        template = self.templates.get(role_name)
        if template is not None:
            if not is_protected_role(template.name):
                override = self.override_repo.get(template.name, tenant_id)
                if override is not None:
                    return frozenset(override.permissions)
            return self.templates.permissions_for(template.name)

        custom = self.custom_role_repo.get_by_name(role_name, tenant_id)
        if custom is not None:
            return frozenset(custom.permissions or [])

        logger.warning(
            "Role does not resolve to any permissions",
            extra={"role_name": role_name, "tenant_id": tenant_id},
        )
        return frozenset()

    def role_exists(self, role_name: str, tenant_id: str) -> bool:
        return (
            self.templates.is_system_role(role_name)
            or self.custom_role_repo.get_by_name(role_name, tenant_id) is not None
        )

    def list_roles(self, tenant_id: str) -> list[dict]:
        """
        List every role visible to a tenant.

        System roles come first in hierarchy order, followed by the
        tenant's custom roles, newest first.

        Args:
            tenant_id: Tenant key

        Returns:
            List of role dicts with effective permissions
        """
        overrides = self.override_repo.get_tenant_overrides(tenant_id)
        roles = [
            self._system_role(template, overrides.get(template.name))
            for template in self.templates.list()
        ]
        roles.extend(
            self._custom_role(role)
            for role in self.custom_role_repo.get_tenant_roles(tenant_id)
        )
        return roles

    def get_role(self, tenant_id: str, name: str) -> dict:
        """
        Get one role by name.

        Raises:
            NotFoundException: If neither a system nor a custom role matches
        """
        template = self.templates.get(name)
        if template is not None:
            return self._system_role(template, self.override_repo.get(template.name, tenant_id))

        custom = self.custom_role_repo.get_by_name(name, tenant_id)
        if custom is None:
            raise NotFoundException("Role not found")
        return self._custom_role(custom)

    def create_role(self, role_create: RoleCreate, context: PermissionContext) -> dict:
        """
        Create a custom role for the acting user's tenant.

        Args:
            role_create: Role name, display name, description and permissions
            context: Permission context of the acting user

        Returns:
            Created role dict

        Raises:
            PermissionDeniedException: If user cannot create roles
            CannotCreateReservedRoleException: If name is "owner" in any case
            ConflictException: If the name is taken in this tenant
            InvalidPermissionException: If a permission is unknown
        """
        if not context.can_create_roles():
            raise PermissionDeniedException(["roles_create", "org_admin"])

        assert_creatable(role_create.name)

        tenant_id = context.tenant_id
        if self.tenant_repo.get_by_id(tenant_id) is None:
            raise NotFoundException("Tenant not found")

        if self.templates.is_system_role(role_create.name):
            raise ConflictException(f"Role '{role_create.name}' already exists")

        permissions = self.validate_permissions(role_create.permissions)

        # Fast path only; the unique constraint settles concurrent creates
        if self.custom_role_repo.get_by_name(role_create.name, tenant_id):
            raise ConflictException(f"Role '{role_create.name}' already exists")

        role = self.custom_role_repo.create(
            CustomRole(
                name=role_create.name,
                display_name=role_create.display_name,
                description=role_create.description,
                permissions=permissions,
                tenant_id=tenant_id,
            )
        )
        logger.info(
            "Created custom role",
            extra={"role_name": role.name, "tenant_id": tenant_id, "user_id": context.user.id},
        )
        return self._custom_role(role)

    def update_role_permissions(
        self, name: str, permissions: list[str], context: PermissionContext
    ) -> dict:
        """
        Replace a role's permission set.

        Custom roles are rewritten in place. Editing a system role stores
        a tenant override; the template itself is never changed.

        Raises:
            PermissionDeniedException: If user cannot edit roles
            CannotModifyProtectedRoleException: If the role is owner
            NotFoundException: If the role does not exist
            InvalidPermissionException: If a permission is unknown
        """
        if not context.can_edit_roles():
            raise PermissionDeniedException(["roles_edit", "org_admin"])

        assert_modifiable(name)

        tenant_id = context.tenant_id
        template = self.templates.get(name)
        custom = None if template else self.custom_role_repo.get_by_name(name, tenant_id)
        if template is None and custom is None:
            raise NotFoundException("Role not found")

        permissions = self.validate_permissions(permissions)

        if template is not None:
            override = self.override_repo.upsert(template.name, tenant_id, permissions)
            result = self._system_role(template, override)
        else:
            result = self._custom_role(self.custom_role_repo.update_permissions(custom, permissions))

        logger.info(
            "Updated role permissions",
            extra={
                "role_name": result["name"],
                "tenant_id": tenant_id,
                "user_id": context.user.id,
                "permission_count": len(permissions),
            },
        )
        return result

    def delete_role(self, name: str, context: PermissionContext) -> None:
        """
        Delete a custom role.

        Raises:
            PermissionDeniedException: If user cannot delete roles
            CannotDeleteProtectedRoleException: If the role is owner
            ForbiddenException: If the role is a system role
            NotFoundException: If the role does not exist
            ConflictException: If active users still hold the role
        """
        if not context.can_delete_roles():
            raise PermissionDeniedException(["roles_delete", "org_admin"])

        assert_deletable(name)

        if self.templates.is_system_role(name):
            raise ForbiddenException("System roles cannot be deleted")

        tenant_id = context.tenant_id
        role = self.custom_role_repo.get_by_name(name, tenant_id)
        if role is None:
            raise NotFoundException("Role not found")

        in_use = self.user_repo.count_active_with_role(tenant_id, role.name)
        if in_use:
            raise ConflictException(
                f"Cannot delete role: {in_use} users are currently assigned to this role"
            )

        self.custom_role_repo.delete(role)
        logger.info(
            "Deleted custom role",
            extra={"role_name": name, "tenant_id": tenant_id, "user_id": context.user.id},
        )
