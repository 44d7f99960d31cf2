"""Boolean predicates over a resolved permission set."""

from collections.abc import Collection


def has_permission(user_permissions: Collection[str] | None, permission: str) -> bool:
    if not user_permissions:
        return False
    return permission in user_permissions


def has_any_permission(user_permissions: Collection[str] | None, *permissions: str) -> bool:
    return any(has_permission(user_permissions, p) for p in permissions)


def has_all_permissions(user_permissions: Collection[str] | None, *permissions: str) -> bool:
    return all(has_permission(user_permissions, p) for p in permissions)


def missing_permissions(user_permissions: Collection[str] | None, *permissions: str) -> list[str]:
    return [p for p in permissions if not has_permission(user_permissions, p)]


def can_create_roles(user_permissions: Collection[str] | None) -> bool:
    return has_any_permission(user_permissions, "roles_create", "org_admin")


def can_edit_roles(user_permissions: Collection[str] | None) -> bool:
    return has_any_permission(user_permissions, "roles_edit", "org_admin")


def can_delete_roles(user_permissions: Collection[str] | None) -> bool:
    return has_any_permission(user_permissions, "roles_delete", "org_admin")


def can_manage_roles(user_permissions: Collection[str] | None) -> bool:
    """True if the user may create, edit or delete roles"""
    return (
        can_create_roles(user_permissions)
        or can_edit_roles(user_permissions)
        or has_permission(user_permissions, "roles_delete")
    )
