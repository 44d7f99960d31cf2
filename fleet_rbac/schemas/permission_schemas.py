from pydantic import Field
from fleet_rbac.schemas.base import CamelModel


class PermissionGroupResponse(CamelModel):
    """Granular permission group of a category"""

    name: str
    permissions: list[str]


class PermissionCategoryResponse(CamelModel):
    """One category of the role editor"""

    name: str
    icon: str
    blocks: list[str]
    granular: dict[str, PermissionGroupResponse]


class RoleTemplateResponse(CamelModel):
    """System role template definition"""

    name: str
    description: str
    block_permissions: list[str]
    granular_permissions: list[str]


class PermissionStructureResponse(CamelModel):
    """Everything the role editor needs to render the catalog"""

    permission_structure: dict[str, PermissionCategoryResponse]
    role_templates: dict[str, RoleTemplateResponse]
    block_permissions: dict[str, str]
    granular_permissions: dict[str, str]


class UserPermissionsResponse(CamelModel):
    """Effective permissions of a user and the roles they may assign"""

    user_permissions: list[str]
    user_role: str
    assignable_roles: list[str]
    has_custom_permissions: bool = False


class PermissionToggleRequest(CamelModel):
    """Toggle one permission in an in-progress permission set"""

    permission: str = Field(..., min_length=1)
    current: list[str] = Field(default_factory=list)


class PermissionToggleResponse(CamelModel):
    """Permission set after the toggle and its cascade"""

    permissions: list[str]


class UserRoleUpdate(CamelModel):
    """Assign a new role to a user"""

    role: str = Field(..., min_length=1, max_length=100)


class UserRoleResponse(CamelModel):
    """User after a role change"""

    id: int
    tenant_id: str
    organization_role: str


class UserPermissionsUpdate(CamelModel):
    """Personal permission set replacing the user's role permissions"""

    block_permissions: list[str] = Field(default_factory=list)
    granular_permissions: list[str] = Field(default_factory=list)
