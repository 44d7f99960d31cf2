"""Which roles a role holder may hand out to other users."""

from fleet_rbac.core.protection import is_protected_role

# Owner is never assignable, so it must not appear on the right-hand side.
ROLE_HIERARCHY: dict[str, tuple[str, ...]] = {
    "owner": ("admin", "user"),
    "admin": ("user",),
    "user": (),
}


def assignable_roles(acting_role: str | None) -> list[str]:
    """
    Roles the holder of ``acting_role`` may assign to other users.

    Unknown roles (including custom roles) may assign nothing.
    """
    if not acting_role:
        return []
    return [
        role
        for role in ROLE_HIERARCHY.get(acting_role.lower(), ())
        if not is_protected_role(role)
    ]


def can_assign_role(acting_role: str | None, target_role: str | None) -> bool:
    """Check if ``acting_role`` may assign ``target_role``"""
    if not target_role or is_protected_role(target_role):
        return False
    return target_role.lower() in assignable_roles(acting_role)
