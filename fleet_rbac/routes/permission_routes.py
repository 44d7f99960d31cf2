from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fleet_rbac.database import get_db
from fleet_rbac.dependencies import get_permission_context, require_permission
from fleet_rbac.models.permission_context import PermissionContext
from fleet_rbac.services.permission_service import PermissionService
from fleet_rbac.schemas.permission_schemas import (
    PermissionStructureResponse,
    PermissionToggleRequest,
    PermissionToggleResponse,
    UserPermissionsResponse,
)

router = APIRouter()


@router.get(
    "/structure",
    response_model=PermissionStructureResponse,
    dependencies=[Depends(require_permission("users_view"))],
)
async def get_permission_structure(db: Session = Depends(get_db)):
    """
    Get the permission catalog and role templates.

    - **Requires users_view**
    - Used by the role editor to render categories, blocks and groups
    """
    service = PermissionService(db)
    return service.get_permission_structure()


@router.get("/me", response_model=UserPermissionsResponse)
async def get_my_permissions(
    context: PermissionContext = Depends(get_permission_context),
    db: Session = Depends(get_db),
):
    """
    Get the authenticated user's effective permissions.

    Also returns the roles this user may assign to others.
    """
    service = PermissionService(db)
    return service.get_user_permissions(context)


@router.post("/toggle", response_model=PermissionToggleResponse)
async def toggle_permission(
    toggle_request: PermissionToggleRequest,
    context: PermissionContext = Depends(get_permission_context),
    db: Session = Depends(get_db),
):
    """
    Toggle one permission in an in-progress permission set.

    - **Requires role management rights**
    - Enabling a block permission adds its granular permissions
    - Disabling one removes those not implied by another active block
    - Nothing is persisted
    """
    service = PermissionService(db)
    permissions = service.preview_toggle(
        toggle_request.permission, toggle_request.current, context
    )
    return {"permissions": permissions}
