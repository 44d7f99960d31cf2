from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from fleet_rbac.database import get_db
from fleet_rbac.dependencies import (
    get_permission_context,
    require_any_permission,
    require_permission,
)
from fleet_rbac.models.permission_context import PermissionContext
from fleet_rbac.services.role_service import RoleService
from fleet_rbac.schemas.role_schemas import (
    RoleCreate,
    RoleDeleteResponse,
    RoleListResponse,
    RolePermissionsUpdate,
    RoleResponse,
)

router = APIRouter()


@router.get("", response_model=RoleListResponse)
async def list_roles(
    context: PermissionContext = Depends(require_permission("roles_view")),
    db: Session = Depends(get_db),
):
    """
    List all roles of the current tenant.

    - **Requires roles_view**
    - System roles first (owner, admin, manager, user, viewer)
    - Custom roles after, newest first
    """
    service = RoleService(db)
    return {"roles": service.list_roles(context.tenant_id)}


@router.get("/{role_name}", response_model=RoleResponse)
async def get_role(
    role_name: str,
    context: PermissionContext = Depends(require_permission("roles_view")),
    db: Session = Depends(get_db),
):
    """Get one role with its effective permissions (**requires roles_view**)"""
    service = RoleService(db)
    return service.get_role(context.tenant_id, role_name)


@router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
async def create_role(
    role_create: RoleCreate,
    context: PermissionContext = Depends(get_permission_context),
    db: Session = Depends(get_db),
):
    """
    Create a custom role.

    - **Requires roles_create or org_admin**
    - The name "owner" is reserved in any letter case
    - Names are unique per tenant
    """
    service = RoleService(db)
    return service.create_role(role_create, context)


@router.put("/{role_name}", response_model=RoleResponse)
async def update_role_permissions(
    role_name: str,
    role_update: RolePermissionsUpdate,
    context: PermissionContext = Depends(get_permission_context),
    db: Session = Depends(get_db),
):
    """
    Replace a role's permission set.

    - **Requires roles_edit or org_admin**
    - The owner role cannot be modified
    - Editing a system role only affects the current tenant
    """
    service = RoleService(db)
    return service.update_role_permissions(role_name, role_update.permissions, context)


@router.delete("/{role_name}", response_model=RoleDeleteResponse)
async def delete_role(
    role_name: str,
    context: PermissionContext = Depends(require_any_permission("roles_delete", "org_admin")),
    db: Session = Depends(get_db),
):
    """
    Delete a custom role.

    - **Requires roles_delete or org_admin**
    - The owner role and other system roles cannot be deleted
    - Roles still assigned to active users cannot be deleted
    """
    service = RoleService(db)
    service.delete_role(role_name, context)

    return {
        "message": "Role deleted successfully",
        "deleted_role": role_name,
    }
