from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fleet_rbac.database import get_db
from fleet_rbac.dependencies import get_permission_context
from fleet_rbac.models.permission_context import PermissionContext
from fleet_rbac.services.permission_service import PermissionService
from fleet_rbac.schemas.permission_schemas import (
    UserPermissionsResponse,
    UserPermissionsUpdate,
    UserRoleResponse,
    UserRoleUpdate,
)

router = APIRouter()


@router.get("/{user_id}/permissions", response_model=UserPermissionsResponse)
async def get_user_permissions(
    user_id: int,
    context: PermissionContext = Depends(get_permission_context),
    db: Session = Depends(get_db),
):
    """
    Get another user's effective permissions.

    - **Requires users_view**
    - User must belong to the current tenant
    - Only for users whose role the acting role may assign
    """
    service = PermissionService(db)
    return service.get_user_permissions_by_id(user_id, context)


@router.put("/{user_id}/permissions", response_model=UserPermissionsResponse)
async def update_user_permissions(
    user_id: int,
    permissions_update: UserPermissionsUpdate,
    context: PermissionContext = Depends(get_permission_context),
    db: Session = Depends(get_db),
):
    """
    Give a user a personal permission set in place of their role's.

    - **Requires users_edit**
    - Only for users whose role the acting role may assign
    - Block permissions expand to their granular permissions
    """
    service = PermissionService(db)
    return service.update_user_permissions(
        user_id,
        permissions_update.block_permissions,
        permissions_update.granular_permissions,
        context,
    )


@router.delete("/{user_id}/permissions", response_model=UserPermissionsResponse)
async def reset_user_permissions(
    user_id: int,
    context: PermissionContext = Depends(get_permission_context),
    db: Session = Depends(get_db),
):
    """Drop a user's personal permission set so their role applies again (**requires users_edit**)"""
    service = PermissionService(db)
    return service.reset_user_permissions(user_id, context)


@router.patch("/{user_id}/role", response_model=UserRoleResponse)
async def assign_user_role(
    user_id: int,
    role_update: UserRoleUpdate,
    context: PermissionContext = Depends(get_permission_context),
    db: Session = Depends(get_db),
):
    """
    Assign a new role to a user.

    - **Requires users_edit**
    - Only roles the acting role may assign (owner: admin/user, admin: user)
    - Owner is never assignable; the owner's own role cannot be changed
    - Cannot change your own role
    """
    service = PermissionService(db)
    return service.assign_user_role(user_id, role_update.role, context)
