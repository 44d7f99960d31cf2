import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from fleet_rbac.core import authorization
from fleet_rbac.core.security import read_claims
from fleet_rbac.core.exceptions import UnauthorizedException, PermissionDeniedException
from fleet_rbac.database import get_db
from fleet_rbac.repositories.user_repository import UserRepository
from fleet_rbac.models.permission_context import PermissionContext
from fleet_rbac.models.user import User
from fleet_rbac.services.permission_service import PermissionService

logger = logging.getLogger(__name__)

security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security), db: Session = Depends(get_db)
) -> User:
    """
    FastAPI dependency to validate JWT and load the user.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate JWT using shared SECRET_KEY
    3. Read auth_user_id ('sub') and the optional tenant claim
    4. Load the active User record for that auth_user_id
    5. Reject tokens whose tenant claim disagrees with the user's tenant
    6. Return User object for use in endpoints

    Raises:
        HTTPException 401: If token invalid or expired, user unknown/inactive,
            or token issued for another tenant
    """
    try:
        claims = read_claims(credentials.credentials)

        user = UserRepository(db).get_by_auth_id(claims.auth_user_id)
        if user is None or not user.is_active:
            raise UnauthorizedException("User not registered or inactive")

        if claims.tenant_id is not None and claims.tenant_id != user.tenant_id:
            logger.warning(
                "Token tenant does not match user tenant",
                extra={"user_id": user.id, "token_tenant_id": claims.tenant_id},
            )
            raise UnauthorizedException("Token issued for a different tenant")

        return user

    except UnauthorizedException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_permission_context(
    user: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> PermissionContext:
    """FastAPI dependency resolving the acting user's role into permissions"""
    return PermissionService(db).build_context(user)


def _deny(
    context: PermissionContext, required: list[str], message: str | None = None
) -> PermissionDeniedException:
    logger.warning(
        "Permission denied",
        extra={
            "user_id": context.user.id,
            "role_name": context.role_name,
            "required": required,
        },
    )
    return PermissionDeniedException(required, message)


def require_permission(permission: str):
    """
    Dependency factory requiring a single permission.

    Usage:
        @router.get("", dependencies=[Depends(require_permission("roles_view"))])
    """

    async def dependency(
        context: PermissionContext = Depends(get_permission_context),
    ) -> PermissionContext:
        if not context.has_permission(permission):
            raise _deny(context, [permission])
        return context

    return dependency


def require_any_permission(*permissions: str):
    """Dependency factory requiring at least one of the permissions"""

    async def dependency(
        context: PermissionContext = Depends(get_permission_context),
    ) -> PermissionContext:
        if not context.has_any_permission(*permissions):
            raise _deny(context, list(permissions))
        return context

    return dependency


def require_all_permissions(*permissions: str):
    """Dependency factory requiring every one of the permissions"""

    async def dependency(
        context: PermissionContext = Depends(get_permission_context),
    ) -> PermissionContext:
        missing = authorization.missing_permissions(context.permissions, *permissions)
        if missing:
            raise _deny(
                context,
                list(permissions),
                f"You don't have all required permissions. Missing: {', '.join(missing)}",
            )
        return context

    return dependency
