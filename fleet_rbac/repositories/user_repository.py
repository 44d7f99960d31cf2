from sqlalchemy import func
from sqlalchemy.orm import Session
from fleet_rbac.models.user import User


class UserRepository:
    """Repository for User model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_auth_id(self, auth_user_id: str) -> User | None:
        """Get user by auth_user_id"""
        return self.db.query(User).filter(User.auth_user_id == auth_user_id).first()

    def get_by_id(self, user_id: int) -> User | None:
        """Get user by internal ID"""
        return self.db.query(User).filter(User.id == user_id).first()

    def count_active_with_role(self, tenant_id: str, role_name: str) -> int:
        """
        Count active users of a tenant currently assigned a role.

        Args:
            tenant_id: Tenant key
            role_name: Role name as stored on the user

        Returns:
            Number of matching active users
        """
        return (
            self.db.query(func.count(User.id))
            .filter(
                User.tenant_id == tenant_id,
                User.organization_role == role_name,
                User.is_active.is_(True),
            )
            .scalar()
        )

    def update_role(self, user: User, role_name: str) -> User:
        """
        Assign a new role to a user.

        Args:
            user: User object to update
            role_name: Role name to assign

        Returns:
            Updated User object
        """
        user.organization_role = role_name
        self.db.commit()
        self.db.refresh(user)
        return user

    def update_custom_permissions(self, user: User, custom_permissions: dict | None) -> User:
        """
        Store or clear a user's personal permission set.

        Args:
            user: User object to update
            custom_permissions: {"block_permissions": [...], "granular_permissions": [...]},
                or None to fall back to the role's permissions

        Returns:
            Updated User object
        """
        user.custom_permissions = custom_permissions
        self.db.commit()
        self.db.refresh(user)
        return user
