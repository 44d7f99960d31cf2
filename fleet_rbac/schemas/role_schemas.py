from datetime import datetime
from pydantic import Field
from fleet_rbac.schemas.base import CamelModel


class RoleResponse(CamelModel):
    """System or custom role with its effective permissions"""

    name: str
    display_name: str
    description: str | None = None
    is_custom: bool
    permissions: list[str]
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RoleListResponse(CamelModel):
    """Roles visible to a tenant"""

    roles: list[RoleResponse]


class RoleCreate(CamelModel):
    """Create a tenant custom role"""

    model_config = {"str_strip_whitespace": True}

    name: str = Field(..., min_length=1, max_length=100)
    display_name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=1000)
    permissions: list[str] = Field(default_factory=list)


class RolePermissionsUpdate(CamelModel):
    """Replace a role's permission set"""

    permissions: list[str] = Field(..., description="Complete new permission set")


class RoleDeleteResponse(CamelModel):
    """Response after deleting a role"""

    message: str
    deleted_role: str
