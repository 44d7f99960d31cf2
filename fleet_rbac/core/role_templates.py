"""System role templates and effective permission resolution."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum as PyEnum

from fleet_rbac.core.permission_catalog import DEFAULT_CATALOG, PermissionCatalog


class SystemRole(str, PyEnum):
    """
    Built-in roles available to every tenant, highest to lowest.

    - OWNER: Everything; the role itself can never be edited or deleted
    - ADMIN: Full fleet and analytics control, organization management
    - MANAGER: Fleet operations plus organization view/create/edit
    - USER: Day-to-day fleet operations
    - VIEWER: Read-only fleet and analytics access
    """

    OWNER = "owner"
    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"
    VIEWER = "viewer"


@dataclass(frozen=True)
class RoleTemplate:
    """Immutable system role definition"""

    name: str
    display_name: str
    description: str
    block_permissions: tuple[str, ...]
    granular_permissions: tuple[str, ...] = ()


def effective_permissions(
    block_permissions: Iterable[str],
    granular_permissions: Iterable[str] = (),
    catalog: PermissionCatalog = DEFAULT_CATALOG,
) -> frozenset[str]:
    """
    Expand block permissions into the full set they grant.

    Each block contributes itself and its cascaded granular permissions. An
    admin block also contributes its sibling blocks, so ``fleet_admin``
    satisfies a ``fleet_view`` check. Explicit granular permissions are
    added as-is.
    """
    result: set[str] = set()
    for block in block_permissions:
        result.add(block)
        result |= {p.id for p in catalog.granular_implied_by(block)}
        for sibling in catalog.blocks_implied_by(block):
            result.add(sibling.id)
            result |= {p.id for p in catalog.granular_implied_by(sibling)}
    result |= set(granular_permissions)
    return frozenset(result)


ROLE_TEMPLATES: dict[str, RoleTemplate] = {
    SystemRole.OWNER.value: RoleTemplate(
        name=SystemRole.OWNER.value,
        display_name="Owner",
        description="Full system access and control",
        block_permissions=("fleet_admin", "org_admin", "analytics_admin"),
        granular_permissions=("geocoding_view",),
    ),
    SystemRole.ADMIN.value: RoleTemplate(
        name=SystemRole.ADMIN.value,
        display_name="Admin",
        description="Organization management with full fleet control",
        block_permissions=(
            "fleet_admin",
            "org_view",
            "org_create",
            "org_edit",
            "org_delete",
            "analytics_view",
            "analytics_export",
            "analytics_admin",
        ),
        granular_permissions=("geocoding_view",),
    ),
    SystemRole.MANAGER.value: RoleTemplate(
        name=SystemRole.MANAGER.value,
        display_name="Manager",
        description="Team leadership with organization management",
        block_permissions=(
            "fleet_view",
            "fleet_create",
            "fleet_edit",
            "fleet_delete",
            "org_view",
            "org_create",
            "org_edit",
            "analytics_view",
            "analytics_export",
        ),
        granular_permissions=("geocoding_view",),
    ),
    SystemRole.USER.value: RoleTemplate(
        name=SystemRole.USER.value,
        display_name="User",
        description="Basic fleet operations and viewing",
        block_permissions=("fleet_view", "fleet_create", "fleet_edit", "analytics_view"),
        granular_permissions=("geocoding_view",),
    ),
    SystemRole.VIEWER.value: RoleTemplate(
        name=SystemRole.VIEWER.value,
        display_name="Viewer",
        description="Read-only access to fleet and analytics",
        block_permissions=("fleet_view", "analytics_view"),
        granular_permissions=("geocoding_view",),
    ),
}


class RoleTemplateStore:
    """Read-only access to the system role templates"""

    def __init__(
        self,
        templates: dict[str, RoleTemplate] = ROLE_TEMPLATES,
        catalog: PermissionCatalog = DEFAULT_CATALOG,
    ):
        self._templates = templates
        self.catalog = catalog

    def get(self, name: str) -> RoleTemplate | None:
        """Look up a template by name (case-insensitive, surrounding whitespace ignored)"""
        if not name:
            return None
        return self._templates.get(name.strip().lower())

    def list(self) -> list[RoleTemplate]:
        """All templates in hierarchy order (owner first)"""
        return list(self._templates.values())

    def is_system_role(self, name: str) -> bool:
        return self.get(name) is not None

    def permissions_for(self, name: str) -> frozenset[str]:
        """
        Effective permissions granted by a template.

        Owner always receives the whole catalog. Unknown names get nothing.
        """
        template = self.get(name)
        if template is None:
            return frozenset()
        if template.name == SystemRole.OWNER.value:
            return frozenset(p.id for p in self.catalog.all_permissions())
        return effective_permissions(
            template.block_permissions, template.granular_permissions, self.catalog
        )


DEFAULT_TEMPLATE_STORE = RoleTemplateStore()
