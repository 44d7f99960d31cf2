import logging

from sqlalchemy.orm import Session
from fleet_rbac.core import cascade
from fleet_rbac.core.permission_catalog import DEFAULT_CATALOG, PermissionCatalog
from fleet_rbac.core.protection import is_protected_role
from fleet_rbac.core.role_hierarchy import assignable_roles
from fleet_rbac.core.role_templates import (
    DEFAULT_TEMPLATE_STORE,
    RoleTemplateStore,
    effective_permissions,
)
from fleet_rbac.models.permission_context import PermissionContext
from fleet_rbac.models.user import User
from fleet_rbac.repositories.user_repository import UserRepository
from fleet_rbac.services.role_service import RoleService
from fleet_rbac.core.exceptions import (
    ForbiddenException,
    NotFoundException,
    PermissionDeniedException,
    ValidationException,
)

logger = logging.getLogger(__name__)


class PermissionService:
    """Service layer for permission lookups, cascades and role assignment"""

    def __init__(
        self,
        db: Session,
        catalog: PermissionCatalog = DEFAULT_CATALOG,
        templates: RoleTemplateStore = DEFAULT_TEMPLATE_STORE,
    ):
        self.db = db
        self.catalog = catalog
        self.templates = templates
        self.role_service = RoleService(db, catalog, templates)
        self.user_repo = UserRepository(db)

    def resolve_user_permissions(self, user: User) -> frozenset[str]:
        """
        Effective permissions of a user.

        A personal permission set, when stored, replaces the role's
        permissions entirely; its blocks are expanded like a template's.
        """
        if user.custom_permissions is not None:
            return effective_permissions(
                user.custom_permissions.get("block_permissions", []),
                user.custom_permissions.get("granular_permissions", []),
                self.catalog,
            )
        return self.role_service.resolve_permissions(user.organization_role, user.tenant_id)

    def build_context(self, user: User) -> PermissionContext:
        """Resolve a user's permissions into a request permission context"""
        permissions = self.resolve_user_permissions(user)
        return PermissionContext(
            user=user, role_name=user.organization_role, permissions=permissions
        )

    def get_permission_structure(self) -> dict:
        """
        Describe the catalog and the role templates for the role editor.

        Returns:
            Dict shaped like PermissionStructureResponse
        """
        structure = {}
        for definition in self.catalog.list_categories():
            structure[definition.category.value] = {
                "name": definition.name,
                "icon": definition.icon,
                "blocks": [p.id for p in definition.blocks],
                "granular": {
                    group.key: {
                        "name": group.name,
                        "permissions": [p.id for p in group.permissions],
                    }
                    for group in definition.groups
                },
            }

        role_templates = {
            template.name: {
                "name": template.display_name,
                "description": template.description,
                "block_permissions": list(template.block_permissions),
                "granular_permissions": list(template.granular_permissions),
            }
            for template in self.templates.list()
        }

        return {
            "permission_structure": structure,
            "role_templates": role_templates,
            "block_permissions": {p.id.upper(): p.id for p in self.catalog.block_permissions()},
            "granular_permissions": {
                p.id.upper(): p.id for p in self.catalog.granular_permissions()
            },
        }

    def preview_toggle(
        self, permission: str, current: list[str], context: PermissionContext
    ) -> list[str]:
        """
        Apply one toggle to an in-progress permission set.

        Raises:
            PermissionDeniedException: If user cannot manage roles
            InvalidPermissionException: If a permission is unknown
        """
        if not context.can_manage_roles():
            raise PermissionDeniedException(["roles_create", "roles_edit", "roles_delete", "org_admin"])

        current = self.role_service.validate_permissions(current)
        return sorted(cascade.toggle(permission, current, self.catalog))

    def get_user_permissions(self, context: PermissionContext) -> dict:
        """Permissions, role and assignable roles of the acting user"""
        return {
            "user_permissions": sorted(context.permissions),
            "user_role": context.role_name,
            "assignable_roles": context.assignable_roles(),
            "has_custom_permissions": context.user.custom_permissions is not None,
        }

    def _get_tenant_user(
        self,
        user_id: int,
        context: PermissionContext,
        message: str = "Cannot access user from different tenant",
    ) -> User:
        user = self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundException("User not found")
        if user.tenant_id != context.tenant_id:
            raise ForbiddenException(message)
        return user

    def _user_permissions(self, user: User) -> dict:
        return {
            "user_permissions": sorted(self.resolve_user_permissions(user)),
            "user_role": user.organization_role,
            "assignable_roles": assignable_roles(user.organization_role),
            "has_custom_permissions": user.custom_permissions is not None,
        }

    def get_user_permissions_by_id(self, user_id: int, context: PermissionContext) -> dict:
        """
        Permissions of another user in the same tenant.

        Raises:
            PermissionDeniedException: If acting user lacks users_view
            NotFoundException: If user does not exist
            ForbiddenException: If user belongs to another tenant, or their
                role is outside the acting role's assignable roles
        """
        if not context.has_permission("users_view"):
            raise PermissionDeniedException(["users_view"])

        user = self._get_tenant_user(user_id, context)
        if not context.can_assign_role(user.organization_role):
            raise ForbiddenException("Cannot view permissions for user with this role")
        return self._user_permissions(user)

    def update_user_permissions(
        self,
        user_id: int,
        block_permissions: list[str],
        granular_permissions: list[str],
        context: PermissionContext,
    ) -> dict:
        """
        Give a user a personal permission set in place of their role's.

        Raises:
            PermissionDeniedException: If acting user lacks users_edit
            NotFoundException: If user does not exist
            ForbiddenException: If user belongs to another tenant, or their
                role is outside the acting role's assignable roles
            ValidationException: If a block list entry is not a block
            InvalidPermissionException: If a permission is unknown
        """
        if not context.has_permission("users_edit"):
            raise PermissionDeniedException(["users_edit"])

        user = self._get_tenant_user(
            user_id, context, "Cannot modify user from different tenant"
        )
        if not context.can_assign_role(user.organization_role):
            raise ForbiddenException("Cannot modify permissions for user with this role")

        blocks = self.role_service.validate_permissions(block_permissions)
        granulars = self.role_service.validate_permissions(granular_permissions)
        not_blocks = [p for p in blocks if not self.catalog.get(p).is_block]
        if not_blocks:
            raise ValidationException(f"Not block permission(s): {', '.join(not_blocks)}")

        user = self.user_repo.update_custom_permissions(
            user, {"block_permissions": blocks, "granular_permissions": granulars}
        )
        logger.info(
            "Updated user permissions",
            extra={
                "user_id": context.user.id,
                "target_user_id": user.id,
                "tenant_id": context.tenant_id,
                "block_count": len(blocks),
                "granular_count": len(granulars),
            },
        )
        return self._user_permissions(user)

    def reset_user_permissions(self, user_id: int, context: PermissionContext) -> dict:
        """
        Drop a user's personal permission set so their role applies again.

        Raises the same errors as update_user_permissions.
        """
        if not context.has_permission("users_edit"):
            raise PermissionDeniedException(["users_edit"])

        user = self._get_tenant_user(
            user_id, context, "Cannot modify user from different tenant"
        )
        if not context.can_assign_role(user.organization_role):
            raise ForbiddenException("Cannot modify permissions for user with this role")

        user = self.user_repo.update_custom_permissions(user, None)
        logger.info(
            "Reset user permissions",
            extra={"user_id": context.user.id, "target_user_id": user.id, "tenant_id": context.tenant_id},
        )
        return self._user_permissions(user)

    def assign_user_role(self, user_id: int, role_name: str, context: PermissionContext) -> User:
        """
        Change another user's role within the role hierarchy.

        Raises:
            PermissionDeniedException: If acting user lacks users_edit
            NotFoundException: If user or role does not exist
            ForbiddenException: If target is self, the owner, another
                tenant's user, or the role is outside the acting role's
                assignable roles
        """
        if not context.has_permission("users_edit"):
            raise PermissionDeniedException(["users_edit"])

        user = self._get_tenant_user(user_id, context)

        if user.id == context.user.id:
            raise ForbiddenException("Cannot change your own role")

        if is_protected_role(user.organization_role):
            raise ForbiddenException("Cannot change owner's role")

        if not self.role_service.role_exists(role_name, context.tenant_id):
            raise NotFoundException("Role not found")

        if not context.can_assign_role(role_name):
            logger.warning(
                "Role assignment outside hierarchy rejected",
                extra={
                    "user_id": context.user.id,
                    "acting_role": context.role_name,
                    "target_role": role_name,
                },
            )
            raise ForbiddenException(f"Role '{context.role_name}' cannot assign role '{role_name}'")

        if user.organization_role == role_name.lower():
            raise ValidationException(f"User already has role '{role_name}'")

        user = self.user_repo.update_role(user, role_name.lower())
        logger.info(
            "Assigned user role",
            extra={
                "user_id": context.user.id,
                "target_user_id": user.id,
                "role_name": user.organization_role,
                "tenant_id": context.tenant_id,
            },
        )
        return user
