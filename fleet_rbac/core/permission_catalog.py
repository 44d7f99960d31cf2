"""
Static registry of every permission the fleet backend understands.

Permissions come in two kinds:

- Block permissions are coarse and cover one action across a whole category
  (``fleet_view``, ``org_admin``).
- Granular permissions are scoped to a single entity group inside a category
  (``trailers_view``, ``users_roles``).

Which granular permissions a block permission brings along is declared
explicitly in ``_CASCADES``; nothing is inferred from identifier substrings.
An ``admin`` block always covers every granular permission of its category.
"""

from dataclasses import dataclass, field
from enum import Enum as PyEnum


class PermissionCategory(str, PyEnum):
    """Top-level permission categories shown in the role editor"""

    FLEET = "fleet"
    ORGANIZATION = "organization"
    ANALYTICS = "analytics"
    UTILITIES = "utilities"


class PermissionAction(str, PyEnum):
    """Standard actions; granular permissions may also use other actions"""

    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    ADMIN = "admin"
    EXPORT = "export"


def _action(value: str) -> PermissionAction | str:
    try:
        return PermissionAction(value)
    except ValueError:
        return value


@dataclass(frozen=True)
class Permission:
    """
    Immutable permission value.

    Attributes:
        id: Stable identifier stored in role permission sets
        category: Category the permission belongs to
        action: Standard action, or a plain string for other granular actions
        is_block: True for coarse block permissions
        group: Granular group key (None for block permissions)
        description: Human readable description for the role editor
    """

    id: str
    category: PermissionCategory
    action: PermissionAction | str
    is_block: bool = False
    group: str | None = None
    description: str = field(default="", compare=False)

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class GranularGroup:
    """Named set of granular permissions for one entity type"""

    key: str
    name: str
    permissions: tuple[Permission, ...]


@dataclass(frozen=True)
class CategoryDefinition:
    """Block permissions and granular groups of one category"""

    category: PermissionCategory
    name: str
    icon: str
    blocks: tuple[Permission, ...]
    groups: tuple[GranularGroup, ...]

    @property
    def granular(self) -> tuple[Permission, ...]:
        return tuple(p for group in self.groups for p in group.permissions)


def _define(
    category: PermissionCategory,
    name: str,
    icon: str,
    prefix: str | None,
    blocks: dict[str, str],
    groups: list[tuple[str, str, dict[str, str]]],
) -> CategoryDefinition:
    block_permissions = tuple(
        Permission(
            id=f"{prefix}_{action}",
            category=category,
            action=_action(action),
            is_block=True,
            description=description,
        )
        for action, description in blocks.items()
    )
    granular_groups = tuple(
        GranularGroup(
            key=key,
            name=group_name,
            permissions=tuple(
                Permission(
                    id=f"{key}_{action}",
                    category=category,
                    action=_action(action),
                    group=key,
                    description=description,
                )
                for action, description in actions.items()
            ),
        )
        for key, group_name, actions in groups
    )
    return CategoryDefinition(category, name, icon, block_permissions, granular_groups)


_CATEGORIES = (
    _define(
        PermissionCategory.FLEET,
        "Fleet Management",
        "🚛",
        prefix="fleet",
        blocks={
            "view": "View fleet information and status",
            "create": "Create new fleet entries",
            "edit": "Edit existing fleet information",
            "delete": "Delete fleet entries",
            "admin": "Full fleet administration access",
        },
        groups=[
            (
                "trailers",
                "Trailers",
                {
                    "view": "View trailer information",
                    "create": "Create new trailers",
                    "edit": "Edit trailer details",
                    "delete": "Delete trailers",
                    "location": "View and edit trailer locations",
                    "history": "Access trailer history and logs",
                },
            ),
            (
                "locations",
                "Locations",
                {
                    "view": "View location data",
                    "create": "Create new locations",
                    "edit": "Edit location information",
                    "delete": "Delete locations",
                },
            ),
            (
                "maintenance",
                "Maintenance",
                {
                    "view": "View maintenance records",
                    "create": "Create maintenance entries",
                    "edit": "Edit maintenance information",
                    "delete": "Delete maintenance records",
                    "alerts": "Manage maintenance alerts",
                },
            ),
            (
                "notes",
                "Notes",
                {
                    "view": "View notes and comments",
                    "create": "Create new notes",
                    "edit": "Edit existing notes",
                    "delete": "Delete notes",
                    "manage": "Manage all notes (admin)",
                },
            ),
        ],
    ),
    _define(
        PermissionCategory.ORGANIZATION,
        "Organization Management",
        "🏢",
        prefix="org",
        blocks={
            "view": "View organization information",
            "create": "Create organization entities",
            "edit": "Edit organization settings",
            "delete": "Delete organization entities",
            "admin": "Full organization administration",
        },
        groups=[
            (
                "users",
                "Users",
                {
                    "view": "View user information",
                    "create": "Create new users",
                    "edit": "Edit user details",
                    "delete": "Delete users",
                    "roles": "Assign roles to users",
                },
            ),
            (
                "roles",
                "Roles",
                {
                    "view": "View role definitions",
                    "create": "Create new roles",
                    "edit": "Edit role permissions",
                    "delete": "Delete roles",
                },
            ),
            (
                "companies",
                "Companies",
                {
                    "view": "View company information",
                    "create": "Create new companies",
                    "edit": "Edit company details",
                    "delete": "Delete companies",
                    "switch": "Switch between companies",
                },
            ),
            (
                "providers",
                "GPS Providers",
                {
                    "view": "View GPS provider information",
                    "create": "Add new GPS providers",
                    "edit": "Edit provider settings",
                    "delete": "Remove GPS providers",
                    "test": "Test GPS provider connections",
                },
            ),
            (
                "settings",
                "Settings",
                {
                    "view": "View organization settings",
                    "edit": "Edit organization settings",
                    "maintenance": "Edit maintenance settings",
                    "notifications": "Edit notification settings",
                },
            ),
        ],
    ),
    _define(
        PermissionCategory.ANALYTICS,
        "Analytics & Reports",
        "📊",
        prefix="analytics",
        blocks={
            "view": "View analytics and reports",
            "export": "Export analytics data",
            "admin": "Full analytics administration",
        },
        groups=[
            (
                "reports",
                "Reports",
                {
                    "view": "View reports",
                    "export": "Export reports",
                    "advanced": "Access advanced reporting features",
                },
            ),
        ],
    ),
    _define(
        PermissionCategory.UTILITIES,
        "Utilities",
        "🔧",
        prefix=None,
        blocks={},
        groups=[
            ("geocoding", "Geocoding", {"view": "Access geocoding services"}),
        ],
    ),
)

# Block -> granular cascade table. Admin blocks are filled in by the catalog.
_CASCADES: dict[str, tuple[str, ...]] = {
    "fleet_view": ("trailers_view", "locations_view", "maintenance_view", "notes_view"),
    "fleet_create": ("trailers_create", "locations_create", "maintenance_create", "notes_create"),
    "fleet_edit": (
        "trailers_edit",
        "trailers_location",
        "locations_edit",
        "maintenance_edit",
        "maintenance_alerts",
        "notes_edit",
        "notes_delete",
    ),
    "fleet_delete": ("trailers_delete", "locations_delete", "maintenance_delete"),
    "org_view": ("users_view", "roles_view", "companies_view", "providers_view", "settings_view"),
    "org_create": ("users_create", "roles_create", "companies_create", "providers_create"),
    "org_edit": (
        "users_edit",
        "roles_edit",
        "companies_edit",
        "providers_edit",
        "settings_edit",
        "settings_maintenance",
        "settings_notifications",
    ),
    "org_delete": ("users_delete", "roles_delete", "companies_delete", "providers_delete"),
    "analytics_view": ("reports_view",),
    "analytics_export": ("reports_view", "reports_export"),
}


class PermissionCatalog:
    """
    Read-only lookup table over category definitions and the cascade table.

    Lookups never raise: unknown identifiers or categories yield None, False
    or empty results, and callers decide how to reject them.
    """

    def __init__(
        self,
        categories: tuple[CategoryDefinition, ...],
        cascades: dict[str, tuple[str, ...]],
    ):
        self._categories = {definition.category: definition for definition in categories}
        self._by_id: dict[str, Permission] = {}
        for definition in categories:
            for permission in definition.blocks + definition.granular:
                if permission.id in self._by_id:
                    raise ValueError(f"Duplicate permission identifier: {permission.id}")
                self._by_id[permission.id] = permission

        self._implied: dict[str, frozenset[Permission]] = {}
        for definition in categories:
            for block in definition.blocks:
                if block.action == PermissionAction.ADMIN:
                    implied = definition.granular
                else:
                    implied = tuple(self._by_id[i] for i in cascades.get(block.id, ()))
                for permission in implied:
                    if permission.is_block or permission.category != definition.category:
                        raise ValueError(
                            f"{block.id} cannot cascade into {permission.id}"
                        )
                self._implied[block.id] = frozenset(implied)

    def _definition(self, category: PermissionCategory | str) -> CategoryDefinition | None:
        try:
            return self._categories.get(PermissionCategory(category))
        except ValueError:
            return None

    def list_categories(self) -> list[CategoryDefinition]:
        return list(self._categories.values())

    def block_permissions_of(self, category: PermissionCategory | str) -> list[Permission]:
        definition = self._definition(category)
        return list(definition.blocks) if definition else []

    def granular_groups_of(self, category: PermissionCategory | str) -> list[GranularGroup]:
        definition = self._definition(category)
        return list(definition.groups) if definition else []

    def is_known(self, identifier: str) -> bool:
        return identifier in self._by_id

    def get(self, identifier: str) -> Permission | None:
        return self._by_id.get(identifier)

    def all_permissions(self) -> list[Permission]:
        return list(self._by_id.values())

    def block_permissions(self) -> list[Permission]:
        return [p for p in self._by_id.values() if p.is_block]

    def granular_permissions(self) -> list[Permission]:
        return [p for p in self._by_id.values() if not p.is_block]

    def granular_implied_by(self, permission: Permission | str) -> frozenset[Permission]:
        """
        Granular permissions that enabling a block permission brings along.

        Returns an empty set for granular or unknown permissions.
        """
        identifier = permission.id if isinstance(permission, Permission) else permission
        return self._implied.get(identifier, frozenset())

    def blocks_implied_by(self, permission: Permission | str) -> frozenset[Permission]:
        """Sibling block permissions covered by an admin block"""
        identifier = permission.id if isinstance(permission, Permission) else permission
        found = self._by_id.get(identifier)
        if found is None or not found.is_block or found.action != PermissionAction.ADMIN:
            return frozenset()
        return frozenset(
            p for p in self._categories[found.category].blocks if p.id != found.id
        )


DEFAULT_CATALOG = PermissionCatalog(_CATEGORIES, _CASCADES)
